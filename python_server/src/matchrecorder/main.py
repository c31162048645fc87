"""Match recorder entry point.

Initializes all components and starts the asyncio event loop:
1. Load configuration
2. Create the host simulation, storage and mode controller
3. Wire session events and command handlers
4. Start the operator REST API
5. Start the tick loop

Usage:
    python -m matchrecorder.main
    # or via entry point:
    matchrecorder --config config/recorder.yaml
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
from dataclasses import dataclass, field
from typing import Optional

from matchrecorder.engine.controller import Mode, ModeController
from matchrecorder.engine.game_loop import GameLoop
from matchrecorder.loaders.config_loader import (
    DEFAULT_CONFIG_PATH,
    RecorderConfig,
    load_recorder_config,
)
from matchrecorder.network.handlers import register_all_handlers
from matchrecorder.network.router import Router
from matchrecorder.persistence.recording_store import RecordingStore
from matchrecorder.sim.world import SimWorld
from matchrecorder.util.events import EventBus

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Container for all services (makes passing around easier)
# ---------------------------------------------------------------------------


@dataclass
class Services:
    """Holds references to all recorder services."""

    config: RecorderConfig = field(default_factory=RecorderConfig)
    event_bus: Optional[EventBus] = None
    world: Optional[SimWorld] = None
    store: Optional[RecordingStore] = None
    controller: Optional[ModeController] = None
    game_loop: Optional[GameLoop] = None
    router: Optional[Router] = None


def create_services(config: RecorderConfig) -> Services:
    """Instantiate all services with proper dependency injection.

    Args:
        config: Loaded recorder configuration.

    Returns:
        Populated :class:`Services` container.
    """
    log.info("Creating services …")

    event_bus = EventBus()
    world = SimWorld(map_name=config.initial_map, event_bus=event_bus)
    store = RecordingStore(config.recordings_dir)
    controller = ModeController(
        world,
        store,
        event_bus=event_bus,
        session_name=config.session_name,
        snap_threshold=config.snap_threshold,
        autorecord=config.autorecord,
    )
    game_loop = GameLoop(world, controller, tick_ms=config.tick_ms)
    router = Router()

    log.info("  session:      %s", controller.session_name)
    log.info("  recordings:   %s", store.directory)
    log.info("  autorecord:   %s", "on" if controller.autorecord else "off")

    svc = Services(
        config=config,
        event_bus=event_bus,
        world=world,
        store=store,
        controller=controller,
        game_loop=game_loop,
        router=router,
    )
    register_all_handlers(svc)
    return svc


async def start_rest_api(services: Services):
    """Start the operator REST API as a background uvicorn task."""
    from matchrecorder.network.rest_api import create_app
    import uvicorn

    app = create_app(services)
    config = uvicorn.Config(
        app,
        host="0.0.0.0",
        port=services.config.rest_port,
        log_level="info",
        access_log=False,
    )
    rest_server = uvicorn.Server(config)
    task = asyncio.create_task(rest_server.serve())
    log.info("Operator API listening on http://0.0.0.0:%d", services.config.rest_port)
    return rest_server, task


async def run(services: Services) -> None:
    """Run the tick loop and operator API until a shutdown signal."""
    loop = asyncio.get_running_loop()

    def _request_shutdown() -> None:
        log.info("Shutdown signal received — stopping …")
        services.game_loop.stop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _request_shutdown)

    rest_server, rest_task = await start_rest_api(services)

    # Fresh match so autorecord (if on) picks it up
    services.world.load_map(services.config.initial_map)

    log.info("Tick loop running (%.0f ms tick)", services.config.tick_ms)
    await services.game_loop.run()

    log.info("Shutting down …")
    controller = services.controller
    if controller.autorecord and controller.mode is Mode.RECORDING:
        controller.save_recording()
    rest_server.should_exit = True
    await rest_task
    log.info("  goodbye")


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the recorder."""
    parser = argparse.ArgumentParser(prog="matchrecorder")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH,
                        help="path to recorder.yaml")
    parser.add_argument("--print-token", type=int, metavar="UID",
                        help="print an operator API token for UID and exit")
    args = parser.parse_args(argv)

    if args.print_token is not None:
        from matchrecorder.network.jwt_auth import create_token
        print(create_token(args.print_token))
        return

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    log.info("=== Match recorder starting ===")

    config = load_recorder_config(args.config)
    services = create_services(config)
    asyncio.run(run(services))


if __name__ == "__main__":
    main()
