import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Optional

from j5_relay.bus import EventBus
from j5_relay.config import RelayConfig, config as default_config
from j5_relay.messages import MotionCommand
from j5_relay.nodes.status import StatusObserver

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
SleepFn = Callable[[float], Awaitable[None]]


class SchedulerState(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"


class Rate:
    """
    Deadline based loop pacing.

    Each call to next_sleep() returns how long to sleep so that the loop
    wakes on the next multiple of the period, regardless of how long the
    loop body took. If the loop falls more than one full period behind,
    the schedule restarts from now instead of bursting to catch up.
    """

    def __init__(self, period_s: float, clock: Clock = time.monotonic) -> None:
        self.period_s = period_s
        self._clock = clock
        self._start = clock()

    def reset(self) -> None:
        self._start = self._clock()

    def next_sleep(self) -> float:
        now = self._clock()
        expected_end = self._start + self.period_s

        # Clock went backwards
        if now < self._start:
            expected_end = now + self.period_s

        sleep_s = expected_end - now
        self._start = expected_end

        if sleep_s <= 0.0:
            if now > expected_end + self.period_s:
                self._start = now
            return 0.0
        return sleep_s


class PublishScheduler:
    def __init__(
        self,
        config: RelayConfig = default_config.relay,
        observer: Optional[StatusObserver] = None,
        clock: Clock = time.monotonic,
        sleep: Optional[SleepFn] = None,
    ) -> None:
        self.config = config
        self.observer = observer or StatusObserver()
        self._clock = clock
        self._sleep_fn = sleep
        self._state = SchedulerState.RUNNING
        self._stop_event = asyncio.Event()
        self.published = 0
        self.failed = 0

    @property
    def state(self) -> SchedulerState:
        return self._state

    def stop(self) -> None:
        """Shutdown signal: RUNNING -> STOPPED. Safe to call more than once."""
        if self._state is SchedulerState.RUNNING:
            logger.info("Stopping command publisher")
        self._state = SchedulerState.STOPPED
        self._stop_event.set()

    async def run(self, command: MotionCommand, bus: EventBus) -> None:
        """
        Publish `command` at the configured rate until stop() is called.

        The status observer is subscribed for the lifetime of this call and
        released before it returns.
        """
        if self._state is SchedulerState.STOPPED:
            logger.info("Command publisher already stopped, not starting")
            return

        subscription = await bus.subscribe(self.config.status_topic, self.observer.on_status)
        logger.info(
            f"Publishing {command.as_dict()} on {self.config.command_topic} "
            f"at {self.config.publish_rate_hz} Hz"
        )
        try:
            rate = Rate(self.config.period_s, self._clock)
            while not self._stop_event.is_set():
                await self._publish(command, bus)
                if self._stop_event.is_set():
                    break
                await self._sleep(rate.next_sleep())
        finally:
            self._state = SchedulerState.STOPPED
            await subscription.unsubscribe()
            logger.info(f"Command publisher stopped ({self.published} sent, {self.failed} failed)")

    async def _publish(self, command: MotionCommand, bus: EventBus) -> None:
        if self.config.log_commands:
            logger.info(
                "Sending Velocity Command: {%f, %f}", command.linear_velocity, command.angular_velocity
            )
        try:
            await bus.publish(self.config.command_topic, command.to_twist())
        except Exception as e:
            # Transport hiccup: try again next tick
            self.failed += 1
            logger.warning(f"Failed to publish velocity command: {e!r}")
        else:
            self.published += 1

    async def _sleep(self, duration: float) -> None:
        if self._sleep_fn is not None:
            await self._sleep_fn(duration)
            return
        if duration <= 0.0:
            await asyncio.sleep(0)
            return
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=duration)
        except asyncio.TimeoutError:
            pass
