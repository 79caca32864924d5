"""
Simulated J5 vehicle.
Consumes velocity commands and reports status so the relay can run without hardware.
"""

import asyncio
import logging
import time
from typing import Optional

from j5_relay.bus import EventBus, Subscription
from j5_relay.config import RelayConfig, SimulatorConfig, config as default_config
from j5_relay.messages import Header, StatusReport, Twist

logger = logging.getLogger(__name__)


class SimulatedJ5:
    def __init__(
        self,
        config: SimulatorConfig = default_config.simulator,
        relay_config: RelayConfig = default_config.relay,
    ) -> None:
        self.config = config
        self.relay_config = relay_config
        self.last_cmd: Optional[Twist] = None
        self._last_cmd_time: Optional[float] = None
        self._seq = 0
        self._subscription: Optional[Subscription] = None
        self._task: Optional[asyncio.Task[None]] = None

    async def start(self, bus: EventBus) -> None:
        self._subscription = await bus.subscribe(self.relay_config.command_topic, self._on_cmd)
        self._task = asyncio.create_task(self._report_loop(bus))
        logger.info(f"Simulated J5 reporting on {self.relay_config.status_topic}")

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        if self._subscription is not None:
            await self._subscription.unsubscribe()
            self._subscription = None

    async def _on_cmd(self, cmd: Twist) -> None:
        self.last_cmd = cmd
        self._last_cmd_time = time.monotonic()

    def commands_fresh(self) -> bool:
        if self._last_cmd_time is None:
            return False
        return time.monotonic() - self._last_cmd_time <= self.config.command_timeout_s

    def make_report(self) -> StatusReport:
        fresh = self.commands_fresh()
        speed = abs(self.last_cmd.linear.x) if (fresh and self.last_cmd is not None) else 0.0
        self._seq += 1
        return StatusReport(
            external_control_active=True,
            # J5 opens the line contactors when commands stop arriving
            contactors_closed=fresh,
            fault_active=False,
            supply_voltage=self.config.nominal_voltage - self.config.voltage_sag_per_mps * speed,
            header=Header(seq=self._seq, stamp=time.time(), frame_id=self.config.frame_id),
        )

    async def _report_loop(self, bus: EventBus) -> None:
        period = 1.0 / self.config.status_rate_hz
        while True:
            await asyncio.sleep(period)
            try:
                await bus.publish(self.relay_config.status_topic, self.make_report())
            except Exception as e:
                logger.warning(f"Failed to publish simulated status: {e!r}")
