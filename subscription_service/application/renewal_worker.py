"""Automatic renewal of elapsed subscriptions.

The worker periodically sweeps the ledger for subscriptions that have
auto-renewal switched on and whose window has elapsed, and renews each
of them through the same use case a manual renewal goes through.
"""

from __future__ import annotations

import asyncio
import contextlib

from pydantic import BaseModel, ConfigDict, Field

from ..domain.exceptions import SubscriptionServiceError
from ..domain.models import Subscription
from ..ports.clock import ClockPort
from ..ports.logger import LoggerPort
from ..ports.repository import SubscriptionRepository
from .use_cases import RenewSubscriptionRequest, RenewSubscriptionUseCase


class RenewalOutcome(BaseModel):
    """Result of one renewal attempt within a sweep."""

    model_config = ConfigDict(frozen=True)

    provider_id: str
    subscriber: str
    renewed: bool
    new_end_time: int | None = None
    error_code: str | None = None
    reason: str | None = None


class RenewalSweepResult(BaseModel):
    """Summary of a single renewal sweep."""

    swept_at: int
    outcomes: list[RenewalOutcome] = Field(default_factory=list)

    @property
    def renewed_count(self) -> int:
        return sum(1 for o in self.outcomes if o.renewed)

    @property
    def failed_count(self) -> int:
        return sum(1 for o in self.outcomes if not o.renewed)


class RenewalWorker:
    """Background loop that renews due auto-renewing subscriptions.

    Each subscription is renewed independently: a declined payment or a
    record changed since the sweep listed it is recorded in the sweep
    result and logged, and the sweep moves on. A subscription lapsed by
    several periods advances by exactly one period per sweep.

    Records whose renewal failed go to the back of later sweeps, ordered by
    their last failure, so records that keep failing never crowd out the
    rest of the batch. A renewal that has started always runs to its end,
    even when ``stop`` cancels the sweep around it.
    """

    def __init__(
        self,
        subscriptions: SubscriptionRepository,
        renew_use_case: RenewSubscriptionUseCase,
        clock: ClockPort,
        logger: LoggerPort,
        interval_seconds: float = 60.0,
        batch_size: int = 100,
        stop_timeout_seconds: float = 2.0,
    ) -> None:
        """Initialize the renewal worker.

        Args:
            subscriptions: Repository to list due subscriptions from
            renew_use_case: Use case performing each renewal
            clock: Trusted time source
            logger: Logger for sweep results
            interval_seconds: Delay between sweeps when running in the background
            batch_size: Maximum subscriptions renewed per sweep
            stop_timeout_seconds: Grace period before a running sweep is cancelled
        """
        if interval_seconds <= 0:
            raise ValueError("Renewal interval must be positive")
        if batch_size < 1:
            raise ValueError("Batch size must be at least 1")

        self._subscriptions = subscriptions
        self._renew = renew_use_case
        self._clock = clock
        self._logger = logger
        self._interval = interval_seconds
        self._batch_size = batch_size
        self._stop_timeout = stop_timeout_seconds

        self._task: asyncio.Task | None = None
        self._stop_event = asyncio.Event()
        self._last_result: RenewalSweepResult | None = None
        # (provider_id, subscriber) -> sweep time of the last failed attempt
        self._failed_at: dict[tuple[str, str], int] = {}
        self._in_flight: asyncio.Future[Subscription] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def last_result(self) -> RenewalSweepResult | None:
        return self._last_result

    async def run_once(self) -> RenewalSweepResult:
        """Renew every subscription due at the current time, up to the batch size."""
        swept_at = self._clock.now()
        result = RenewalSweepResult(swept_at=swept_at)

        for subscription in await self._select_due(swept_at):
            if self._task is not None and self._stop_event.is_set():
                break

            key = subscription.key.as_tuple()
            request = RenewSubscriptionRequest(provider_id=key[0], subscriber=key[1])
            try:
                renewed = await self._renew_shielded(request)
            except SubscriptionServiceError as e:
                self._failed_at[key] = swept_at
                self._logger.warning(
                    "Automatic renewal failed",
                    provider_id=request.provider_id,
                    subscriber=request.subscriber,
                    error_code=e.error_code,
                    reason=e.message,
                )
                result.outcomes.append(
                    RenewalOutcome(
                        provider_id=request.provider_id,
                        subscriber=request.subscriber,
                        renewed=False,
                        error_code=e.error_code,
                        reason=e.message,
                    )
                )
                continue

            self._failed_at.pop(key, None)
            result.outcomes.append(
                RenewalOutcome(
                    provider_id=request.provider_id,
                    subscriber=request.subscriber,
                    renewed=True,
                    new_end_time=renewed.end_time,
                )
            )

        if result.outcomes:
            self._logger.info(
                "Renewal sweep finished",
                swept_at=swept_at,
                renewed=result.renewed_count,
                failed=result.failed_count,
            )
        self._last_result = result
        return result

    async def start(self) -> None:
        """Start sweeping in the background."""
        if self.is_running:
            self._logger.warning("Renewal worker already running")
            return

        self._stop_event.clear()
        self._task = asyncio.create_task(self._loop())
        self._logger.info("Started renewal worker", interval=f"{self._interval}s")

    async def stop(self) -> None:
        """Stop sweeping.

        A sweep overrunning the timeout is cancelled between renewals; the
        renewal it was waiting on is still awaited to completion.
        """
        self._stop_event.set()

        if self._task and not self._task.done():
            try:
                await asyncio.wait_for(self._task, timeout=self._stop_timeout)
            except TimeoutError:
                self._task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await self._task

        await self._finish_in_flight()
        self._task = None
        self._logger.info("Stopped renewal worker")

    async def _select_due(self, now: int) -> list[Subscription]:
        # Listing past every known failure leaves a full batch of fresh records
        wanted = self._batch_size + len(self._failed_at)
        due = list(await self._subscriptions.list_due_for_renewal(now, limit=wanted))

        if len(due) < wanted:
            # The listing is complete, so unlisted failures are no longer due
            listed = {s.key.as_tuple() for s in due}
            self._failed_at = {k: t for k, t in self._failed_at.items() if k in listed}

        # Stable sort: fresh records keep the repository order
        due.sort(
            key=lambda s: (
                s.key.as_tuple() in self._failed_at,
                self._failed_at.get(s.key.as_tuple(), 0),
            )
        )
        return due[: self._batch_size]

    async def _renew_shielded(self, request: RenewSubscriptionRequest) -> Subscription:
        renewal = asyncio.ensure_future(self._renew.execute(request))
        self._in_flight = renewal
        try:
            return await asyncio.shield(renewal)
        finally:
            if renewal.done():
                self._in_flight = None

    async def _finish_in_flight(self) -> None:
        renewal, self._in_flight = self._in_flight, None
        if renewal is None:
            return

        await asyncio.wait({renewal})
        if not renewal.cancelled() and renewal.exception() is not None:
            self._logger.warning(
                "Automatic renewal failed during stop", reason=str(renewal.exception())
            )

    async def _loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                await self.run_once()
            except Exception as e:
                # The loop outlives failed sweeps
                self._logger.exception("Renewal sweep crashed", exc_info=e)

            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
