"""
Main entry point for BLOBDASH.

Loads settings, sets up logging and opens the game window.
"""

import argparse
import asyncio
import logging
import random
import sys
from pathlib import Path

from dotenv import load_dotenv

from blobdash.config.settings import Settings, get_settings
from blobdash.core.clock import Clock
from blobdash.core.events import EventBus
from blobdash.game.run import RunController
from blobdash.session import GameSession
from blobdash.storage.best_score import JsonBestScoreStore


def setup_logging(debug: bool = False, log_file: Path | None = None) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [console_handler]
    file_error: OSError | None = None

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            # Truncate on each run for fresh logs
            file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)
        except OSError as e:
            file_error = e

    logging.basicConfig(level=level, handlers=handlers, force=True)

    if file_error is not None:
        logging.getLogger(__name__).warning(
            f"Cannot write log file {log_file}: {file_error}; logging to console only"
        )


def build_session(settings: Settings, best_file: Path | None = None) -> GameSession:
    """Create the controller, bus and clock for one window."""
    event_bus = EventBus()
    store = JsonBestScoreStore(best_file or settings.best_score_file)
    controller = RunController(
        settings=settings,
        store=store,
        rng=random.Random(settings.seed),
        event_bus=event_bus,
    )
    clock = Clock(
        max_delta_ms=settings.difficulty.max_delta_ms,
        fixed_step_ms=settings.fixed_step_ms,
    )
    return GameSession(controller, event_bus, clock)


async def run_window(session: GameSession, settings: Settings) -> None:
    """Run the pygame window until it is closed."""
    from blobdash.simulator.window import SimulatorWindow, WindowConfig

    window = SimulatorWindow(
        controller=session.controller,
        event_bus=session.event_bus,
        config=WindowConfig.from_settings(settings.display),
    )
    await window.run()
    session.close()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="BLOBDASH - jump, crouch, survive")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the obstacle stream")
    parser.add_argument("--best-file", type=Path, default=None, help="JSON file holding the best score")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    load_dotenv()
    args = parse_args(argv)

    settings = get_settings()
    updates = {}
    if args.debug:
        updates["debug"] = True
    if args.seed is not None:
        updates["seed"] = args.seed
    if updates:
        settings = settings.model_copy(update=updates)

    setup_logging(settings.debug, settings.log_file)

    logger = logging.getLogger(__name__)
    logger.info("BLOBDASH starting...")

    try:
        session = build_session(settings, args.best_file)
        asyncio.run(run_window(session, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

    logger.info("BLOBDASH stopped")


if __name__ == "__main__":
    main()
