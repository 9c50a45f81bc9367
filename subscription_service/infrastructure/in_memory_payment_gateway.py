"""In-memory payment gateway.

Keeps account balances in a dict and moves funds between them. Outcomes
can be programmed (declines queued up front or blocked payers) so the
ledger can be exercised against every payment result without a real
payment backend.
"""

from __future__ import annotations

import asyncio
from collections import deque

from ..domain.models import PaymentReceipt
from ..domain.value_objects import Identity
from ..ports.payment_gateway import PaymentGatewayPort


class InMemoryPaymentGateway(PaymentGatewayPort):
    """Payment gateway backed by in-memory balances."""

    def __init__(self, default_balance: int = 0) -> None:
        """Initialize the gateway.

        Args:
            default_balance: Balance assumed for accounts never funded
        """
        self._default_balance = default_balance
        self._balances: dict[Identity, int] = {}
        self._queued_declines: deque[str] = deque()
        self._blocked: dict[Identity, str] = {}
        self._history: list[PaymentReceipt] = []
        self._lock = asyncio.Lock()

    def deposit(self, identity: Identity | str, amount: int) -> None:
        """Credit an account."""
        if amount < 0:
            raise ValueError("Deposit amount must be non-negative")
        identity = Identity.of(identity)
        self._balances[identity] = self.balance_of(identity) + amount

    def balance_of(self, identity: Identity | str) -> int:
        return self._balances.get(Identity.of(identity), self._default_balance)

    def decline_next(self, reason: str = "declined by issuer") -> None:
        """Make the next transfer fail with ``reason`` regardless of balances."""
        self._queued_declines.append(reason)

    def block(self, identity: Identity | str, reason: str = "account blocked") -> None:
        """Decline every transfer paid by ``identity`` until unblocked."""
        self._blocked[Identity.of(identity)] = reason

    def unblock(self, identity: Identity | str) -> None:
        self._blocked.pop(Identity.of(identity), None)

    @property
    def history(self) -> list[PaymentReceipt]:
        """All receipts issued so far, approved and declined."""
        return list(self._history)

    @property
    def approved_transfers(self) -> list[PaymentReceipt]:
        return [r for r in self._history if r.success]

    async def transfer(
        self, from_identity: Identity, to_identity: Identity, amount: int
    ) -> PaymentReceipt:
        async with self._lock:
            receipt = self._settle(from_identity, to_identity, amount)
            self._history.append(receipt)
            return receipt

    def _settle(
        self, from_identity: Identity, to_identity: Identity, amount: int
    ) -> PaymentReceipt:
        if self._queued_declines:
            reason = self._queued_declines.popleft()
            return PaymentReceipt.declined(from_identity, to_identity, amount, reason)
        if from_identity in self._blocked:
            reason = self._blocked[from_identity]
            return PaymentReceipt.declined(from_identity, to_identity, amount, reason)

        available = self.balance_of(from_identity)
        if available < amount:
            return PaymentReceipt.declined(
                from_identity,
                to_identity,
                amount,
                f"insufficient funds: balance {available}, required {amount}",
            )

        self._balances[from_identity] = available - amount
        self._balances[to_identity] = self.balance_of(to_identity) + amount
        return PaymentReceipt.approved(from_identity, to_identity, amount)
