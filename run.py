from __future__ import annotations

import argparse
import logging
import pathlib
from typing import Optional

from rich.markup import escape

from resistor_qc.config import AppConfig, load_config
from resistor_qc.console import configure_logging, console
from resistor_qc.errors import ConfigError, InvalidSelection, QCError, StoreNotFoundError, UserExit
from resistor_qc.logging_utils import select_store
from resistor_qc.processing import FORMULAS
from resistor_qc.prompts import Prompter
from resistor_qc.session import Session, review_log
from resistor_qc.simulator import SampleSimulator, SimulatorConfig

logger = logging.getLogger("resistor_qc")


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Resistor batch quality-control calculator")
    p.add_argument("--config", type=str, default=None, help="Path to config.yaml")

    # Config overrides
    p.add_argument("--store-dir", type=str, default=None, help="Directory holding the batch logs")
    p.add_argument("--sample-size", type=int, default=None, help="Measurements per batch (default 10)")
    p.add_argument("--formula", choices=FORMULAS, default=None, help="Statistics layout written to the log")
    p.add_argument("--log-level", type=str, default=None, help="Diagnostic log level (DEBUG, INFO, ...)")

    # Demo values
    p.add_argument("--demo", action="store_true", help="Fill the sample with generated demo values")
    p.add_argument("--seed", type=int, default=None, help="Random seed for --demo")

    # Non-interactive review
    p.add_argument("--view", type=str, default=None, metavar="NAME", help="Print the named log and exit")
    p.add_argument("--supplier", type=str, default=None, help="With --view, only show this supplier")

    return p


def merge_overrides(cfg: AppConfig, args: argparse.Namespace) -> AppConfig:
    if args.store_dir is not None:
        cfg.store.directory = args.store_dir
    if args.sample_size is not None:
        cfg.sample.size = args.sample_size
    if args.formula is not None:
        cfg.sample.formula = args.formula
    if args.log_level is not None:
        cfg.logging.level = args.log_level
    return cfg.validate()


def main(argv: Optional[list[str]] = None, prompter: Optional[Prompter] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    try:
        cfg = load_config(pathlib.Path(args.config) if args.config else None)
        cfg = merge_overrides(cfg, args)
    except ConfigError as e:
        console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        return 2

    configure_logging(cfg.logging.level)
    logger.debug("Loaded configuration: %s", cfg)

    try:
        if args.view is not None:
            path = select_store(args.view, cfg.store.directory, cfg.store.extension, must_exist=True)
            review_log(path, args.supplier, console)
            return 0

        simulator = SampleSimulator(SimulatorConfig(seed=args.seed)) if args.demo else None
        session = Session(cfg, prompter or Prompter(console), console, simulator=simulator)
        session.run()
    except UserExit:
        return 0
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped by user.[/yellow]")
        return 0
    except StoreNotFoundError as e:
        console.print(f"[yellow]{escape(str(e))}. Exiting program.[/yellow]")
        return 0
    except InvalidSelection as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        return 2
    except QCError as e:
        logger.error("%s", e)
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
