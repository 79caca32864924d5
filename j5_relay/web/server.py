import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from j5_relay.bus import EventBus
from j5_relay.config import Config, config as default_config
from j5_relay.hw.j5_stub import SimulatedJ5
from j5_relay.messages import MotionCommand, StatusReport
from j5_relay.nodes.publisher import PublishScheduler

logger = logging.getLogger(__name__)


class StatusStream:
    """Per-client status buffer. The bus handler never waits on the client."""

    def __init__(self, maxsize: int) -> None:
        self.queue: asyncio.Queue[StatusReport] = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0

    async def on_status(self, report: StatusReport) -> None:
        try:
            self.queue.put_nowait(report)
        except asyncio.QueueFull:
            self.dropped += 1

    async def get(self) -> StatusReport:
        return await self.queue.get()


def create_app(
    command: MotionCommand,
    bus: EventBus,
    cfg: Config = default_config,
    scheduler: Optional[PublishScheduler] = None,
    simulator: Optional[SimulatedJ5] = None,
) -> FastAPI:
    scheduler = scheduler or PublishScheduler(cfg.relay)
    if simulator is None and cfg.simulator.enabled:
        simulator = SimulatedJ5(cfg.simulator, cfg.relay)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        if simulator is not None:
            await simulator.start(bus)
        publish_task = asyncio.create_task(scheduler.run(command, bus))
        try:
            yield
        finally:
            scheduler.stop()
            await publish_task
            if simulator is not None:
                await simulator.stop()

    app = FastAPI(lifespan=lifespan)
    app.state.scheduler = scheduler
    app.state.simulator = simulator

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "scheduler": scheduler.state.value}

    @app.get("/api/config")
    async def get_config() -> dict[str, Any]:
        """Лимиты и топики для оператора"""
        return {
            "command_topic": cfg.relay.command_topic,
            "status_topic": cfg.relay.status_topic,
            "publish_rate_hz": cfg.relay.publish_rate_hz,
            "max_velocity": cfg.relay.max_velocity,
            "max_turn_rate": cfg.relay.max_turn_rate,
        }

    @app.get("/api/command")
    async def get_command() -> dict[str, Any]:
        return {
            **command.as_dict(),
            "published": scheduler.published,
            "failed": scheduler.failed,
        }

    @app.websocket("/ws/status")
    async def ws_status(ws: WebSocket) -> None:
        await ws.accept()
        stream = StatusStream(cfg.server.status_queue_size)

        async def pump() -> None:
            while True:
                report = await stream.get()
                await ws.send_json(report.as_dict())

        async with await bus.subscribe(cfg.relay.status_topic, stream.on_status):
            pump_task = asyncio.create_task(pump())
            try:
                # Client messages are ignored, receiving only detects the disconnect
                while True:
                    await ws.receive_text()
            except WebSocketDisconnect:
                logger.info(f"Status client disconnected ({stream.dropped} reports dropped)")
            finally:
                pump_task.cancel()
                await asyncio.gather(pump_task, return_exceptions=True)

    return app
