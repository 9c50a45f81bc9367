"""Payment gateway port.

The gateway moves a fixed amount from a subscriber to a provider as a
single unit. The service awaits the outcome before committing any state.
"""

from abc import ABC, abstractmethod

from ..domain.models import PaymentReceipt
from ..domain.value_objects import Identity


class PaymentGatewayPort(ABC):
    """Abstract interface for moving funds between identities."""

    @abstractmethod
    async def transfer(
        self, from_identity: Identity, to_identity: Identity, amount: int
    ) -> PaymentReceipt:
        """Transfer ``amount`` from ``from_identity`` to ``to_identity``.

        Args:
            from_identity: Paying subscriber
            to_identity: Receiving provider authority
            amount: Amount in the smallest currency unit

        Returns:
            PaymentReceipt with ``success`` set, or a declined receipt
            carrying the failure reason. Either everything moved or nothing did.
        """
        ...
