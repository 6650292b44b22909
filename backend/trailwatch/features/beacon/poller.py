"""
Beacon poller.

Background loop that reconciles the beacon feed with the persisted
trail status every few seconds.

Only one replica may poll, otherwise notifications would be sent once
per replica. The leader is picked by convention: the instance running
in the primary region. This is not a distributed lock; if two instances
can ever both see themselves as primary, replace it with a lease.
"""

import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from trailwatch.features.status import StatusStore
from trailwatch.shared.errors import BeaconNotFound, TrailwatchError
from .client import BeaconClient
from .fsm import (
    Decision,
    Intent,
    NotifyDiscard,
    NotifyEnd,
    NotifyStart,
    SetBeaconUrl,
    SetOnTrail,
    evaluate,
)
from .notifier import Notifier

logger = logging.getLogger(__name__)


# =============================================================================
# Leader election
# =============================================================================

class Role(str, Enum):
    LEADER = "leader"
    FOLLOWER = "follower"


def resolve_role(current_region: Optional[str], primary_region: Optional[str]) -> Role:
    """
    Decide whether this instance runs the poller.

    Both regions set and different -> FOLLOWER, including an empty
    region compared to a named one. Only an unset region runs
    unconditionally, so a single instance without Fly still polls.
    """
    if current_region is not None and primary_region is not None:
        if current_region == primary_region:
            logger.info(f"Beacon loop running in region: {current_region}")
            return Role.LEADER
        logger.info(
            f"Region ({current_region}) and primary region ({primary_region}) "
            f"do not match, skipping beacon loop"
        )
        return Role.FOLLOWER

    logger.warning("FLY_REGION and PRIMARY_REGION are not both set, running beacon loop")
    return Role.LEADER


# =============================================================================
# Poller
# =============================================================================

class BeaconPoller:
    """
    Background task runner for beacon reconciliation.

    Call `start()` to begin polling.
    Call `stop()` to gracefully stop.

    Usage:
        poller = BeaconPoller(status_store, beacon_client, notifier, interval=45)
        await poller.start()
        # ... later ...
        await poller.stop()
    """

    def __init__(
        self,
        status_store: StatusStore,
        beacon: BeaconClient,
        notifier: Notifier,
        interval: float = 45.0,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.status_store = status_store
        self.beacon = beacon
        self.notifier = notifier
        self.interval = interval
        self._clock = clock
        self._task: Optional[asyncio.Task] = None
        self._stop_event = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self):
        """Start background polling loop."""
        if self.running:
            return

        self._stop_event.clear()
        self._task = asyncio.create_task(self._run_loop())
        logger.info("Beacon poller started")

    async def stop(self):
        """Stop background polling loop and wait for the current cycle."""
        self._stop_event.set()
        if self._task:
            try:
                await self._task
            finally:
                self._task = None
        logger.info("Beacon poller stopped")

    async def _run_loop(self):
        """Main polling loop."""
        while not self._stop_event.is_set():
            try:
                await self.run_cycle()
            except Exception as e:
                logger.exception(f"Beacon cycle error: {e}")

            # Wait before next cycle, waking early on stop()
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass

    async def run_cycle(self) -> Optional[Decision]:
        """
        Run one reconciliation pass.

        Returns:
            The status-machine decision, or None if the cycle ended early
        """
        status = await self.status_store.get_status()

        if status.beacon_url is None:
            if status.is_on_trail:
                logger.warning(
                    "Troy status indicates on the trails but no beacon url found, "
                    "clearing troy status"
                )
                await self.status_store.set_on_trail(False)
            else:
                logger.debug("No beacon url found, troy is not on the trails")
            return None

        try:
            snapshot = await self.beacon.get_snapshot(status.beacon_url)
        except BeaconNotFound:
            logger.warning("Beacon data not found (404 Not Found), clearing beacon url")
            await self.status_store.set_beacon_url(None)
            return None
        except TrailwatchError as e:
            logger.error(f"Failed to get beacon data: {e}")
            return None

        decision = evaluate(status, snapshot, self._clock())
        logger.debug(
            f"Beacon status {snapshot.status.value} -> {decision.status.value}, "
            f"ride time {decision.ride_time_minutes} min"
        )

        for intent in decision.intents:
            await self._apply(intent)

        return decision

    async def _apply(self, intent: Intent) -> None:
        if isinstance(intent, SetOnTrail):
            if intent.is_on_trail:
                logger.debug("Beacon data indicates troy is active on the trails")
            else:
                logger.info("Troy status updated to off the trails")
            await self.status_store.set_on_trail(intent.is_on_trail)
        elif isinstance(intent, SetBeaconUrl):
            logger.info("Clearing beacon url")
            await self.status_store.set_beacon_url(intent.beacon_url)
        elif isinstance(intent, NotifyStart):
            logger.info("Troy status updated to on the trails")
            await self.notifier.notify_start(intent.beacon_url)
        elif isinstance(intent, NotifyEnd):
            await self.notifier.notify_end(intent.activity_id)
        elif isinstance(intent, NotifyDiscard):
            await self.notifier.notify_discard()
