import asyncio
import logging
import signal
import sys
from collections.abc import Sequence
from typing import Optional

import uvicorn

from j5_relay import event_bus
from j5_relay.bus import EventBus
from j5_relay.config import Config, LoggingConfig, config
from j5_relay.hw.j5_stub import SimulatedJ5
from j5_relay.messages import MotionCommand
from j5_relay.nodes.command import CommandBuilder
from j5_relay.nodes.publisher import PublishScheduler
from j5_relay.web.server import create_app

logger = logging.getLogger(__name__)


def parse_cli(argv: Sequence[str]) -> tuple[list[str], bool]:
    """
    Split argv into velocity tokens and the --monitor flag.

    j5-relay [linear_velocity] [angular_velocity] [--monitor]

    Never fails on bad input: other "--" options are dropped and the
    remaining tokens are left for CommandBuilder to parse.
    """
    monitor = "--monitor" in argv
    tokens = [arg for arg in argv if not arg.startswith("--")]
    return tokens, monitor


def setup_logging(cfg: LoggingConfig) -> None:
    logging.basicConfig(level=logging.INFO, format=cfg.format)
    logging.getLogger("j5_relay").setLevel(cfg.level)


async def run_relay(
    command: MotionCommand,
    bus: EventBus,
    cfg: Config = config,
    scheduler: Optional[PublishScheduler] = None,
) -> None:
    scheduler = scheduler or PublishScheduler(cfg.relay)
    simulator = SimulatedJ5(cfg.simulator, cfg.relay) if cfg.simulator.enabled else None

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, scheduler.stop)

    if simulator is not None:
        await simulator.start(bus)
    try:
        await scheduler.run(command, bus)
    finally:
        if simulator is not None:
            await simulator.stop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)


def main(argv: Optional[Sequence[str]] = None) -> int:
    argv = sys.argv if argv is None else argv
    setup_logging(config.logging)

    tokens, monitor = parse_cli(argv[1:])
    program = argv[0] if argv else "j5_relay"
    command = CommandBuilder(config.relay).build([program, *tokens])

    if monitor:
        uvicorn.run(
            create_app(command, event_bus, config),
            host=config.server.host,
            port=config.server.port,
            log_level="info",
        )
    else:
        asyncio.run(run_relay(command, event_bus, config))

    logger.info("Shutdown complete")
    return 0
