"""Forest Walk - Entry Point.

Two persons start in opposite corners of a forest and walk randomly until
they meet. Prints the final status line.
"""

import argparse
import asyncio
import sys

from config import DIM_MAX, DIM_MIN, load_config
from core.errors import ConfigError
from internal.logging import LogLevel, StructuredLogger, get_logger
from utils.crash import configure as configure_crash, create_async_handler, install_crash_handler

INTEGER_ERROR = "Please enter an integer!"


def prompt_dimension(name, read=input, write=print):
    """Ask until an integer in [DIM_MIN, DIM_MAX] is entered."""
    message = f"Please enter an integer value for {name} [{DIM_MIN}, {DIM_MAX}]: "
    while True:
        write(message)
        raw = read().strip()
        try:
            value = int(raw)
        except ValueError:
            write(INTEGER_ERROR)
            continue
        if DIM_MIN <= value <= DIM_MAX:
            return value


def build_parser():
    ap = argparse.ArgumentParser(description="Two random walkers in a bounded forest, run until they meet")
    ap.add_argument("-a", "--width", type=int, default=None, help=f"Forest width [{DIM_MIN}, {DIM_MAX}]")
    ap.add_argument("-b", "--height", type=int, default=None, help=f"Forest height [{DIM_MIN}, {DIM_MAX}]")
    ap.add_argument("--seed", type=int, default=None, help="Random seed (int); defaults to random")
    ap.add_argument("--movement", choices=("free", "axis"), default=None,
                    help="free: diagonal steps allowed; axis: one axis per step")
    ap.add_argument("--max-updates", type=int, default=None, help="Step ceiling")
    ap.add_argument("--paced", action="store_true",
                    help="Step at the configured rate with a frame presenter attached")
    ap.add_argument("--config", default=None, help="Path to a config.json")
    ap.add_argument("--log-level", default=None, help="DEBUG, INFO, WARN or ERROR")
    return ap


def resolve_config(args, read=input, write=print):
    """Merge config file and CLI flags; prompt for missing dimensions."""
    config = load_config(args.config)
    sim = config.simulation
    sim.width = args.width if args.width is not None else prompt_dimension("A", read, write)
    sim.height = args.height if args.height is not None else prompt_dimension("B", read, write)
    if args.seed is not None:
        sim.seed = args.seed
    if args.movement is not None:
        sim.movement = args.movement
    if args.max_updates is not None:
        sim.max_updates = args.max_updates
    if args.log_level is not None:
        config.logging.level = args.log_level
    try:
        LogLevel.parse(config.logging.level)
    except KeyError as exc:
        raise ConfigError("unknown log level", field="level", value=config.logging.level, cause=exc) from exc
    sim.validate()
    return config


def run(config, paced=False):
    from forest.engine import Simulation

    simulation = Simulation(config.simulation)
    configure_crash(config.logging.crash_file, status_provider=simulation.status)

    if not paced:
        return simulation.start()

    from forest.paced import run_paced
    from presentation.frames import FramePresenter, FrameRenderer

    async def main():
        logger = get_logger()
        asyncio.get_running_loop().set_exception_handler(create_async_handler(logger))
        presenter = FramePresenter(FrameRenderer(config.simulation.cell_size))
        await run_paced(simulation, presenter, log_file=config.logging.file or None)
        logger.info("frames presented", frames=presenter.frames)

    asyncio.run(main())
    return simulation


def main(argv=None):
    args = build_parser().parse_args(argv)
    install_crash_handler()
    try:
        config = resolve_config(args)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    StructuredLogger.configure(LogLevel.parse(config.logging.level))
    simulation = run(config, paced=args.paced)
    print(simulation.status())
    return 0


if __name__ == "__main__":
    sys.exit(main())
