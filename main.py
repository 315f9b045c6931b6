#!/usr/bin/env python3
"""
Glyph DB — Cross-reference lookup over assembly, drive, and Zendesk snapshots.
Reads local JSON exports only. Nothing is written and nothing leaves the machine.

Usage:
  python main.py                      # interactive session, Q to quit
  python main.py SN100                # one-shot lookup
  python main.py SN100 '$1609459200000'
  python main.py SN100 --json
  python main.py --data-dir /srv/exports
  python main.py --no-color --no-summary

Interactive input:
  <text>    search all three databases (case-insensitive substring)
  $<int>    decode a legacy serial date, e.g. $1609459200000
  #<text>   filter previous results (not supported)
  Q         quit

Environment variables (or .env):
  DATA_DIR        Directory holding ASM.json, DWE.json and ZEN.json (default: .)
  LOG_LEVEL       Logging level (default: WARNING)
  MAX_RESULTS     Per-database match cap before a search is rejected (default: 25)
"""

import argparse
import json
import logging
from pathlib import Path
from typing import Optional

from core.aggregator import summarize
from core.config import Settings, get_settings
from core.formatter import (
    BOLD,
    CYAN,
    GREEN,
    YELLOW,
    Legend,
    build_legend,
    disable_color,
    outcome_to_dict,
    paint,
    print_outcome,
    print_summary,
)
from core.models import Dataset, Quit
from core.pipeline import process_query
from snapshot.loader import load_assemblies, load_dataset, load_drives, load_tickets

logger = logging.getLogger("glyph.cli")

PROMPT = "Please enter search criteria:"


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _announce(message: str, color: str = YELLOW) -> None:
    logger.info(message)
    print(paint(message, color))


def load_with_progress(settings: Settings) -> Dataset:
    """Load each snapshot, reporting progress the way the session banner does."""
    steps = (
        ("Assemblies", load_assemblies, settings.assemblies_file),
        ("Drives with Enclosures", load_drives, settings.drives_file),
        ("Zendesk", load_tickets, settings.tickets_file),
    )
    loaded = []
    for label, loader, filename in steps:
        _announce(f"Loading {label} Database...")
        records = loader(settings.snapshot_path(filename))
        _announce(f"{label} Database Loaded.", GREEN)
        logger.info("%s: %d record(s)", label, len(records))
        loaded.append(records)
    assemblies, drives, tickets = loaded
    return Dataset(assemblies=assemblies, drives=drives, tickets=tickets)


def run_interactive(dataset: Dataset, legend: Legend, settings: Settings, input_fn=input) -> None:
    """Read-evaluate-print loop. Ends on Q, EOF, or Ctrl-C."""
    print(paint(PROMPT, CYAN, BOLD))
    while True:
        try:
            raw = input_fn()
        except (EOFError, KeyboardInterrupt):
            print_outcome(Quit())
            return

        outcome = process_query(raw, dataset, limit=settings.max_results)
        print_outcome(outcome, legend)
        if isinstance(outcome, Quit):
            return
        print(f"\n{paint(PROMPT, CYAN, BOLD)}")


def run_once(terms: list[str], dataset: Dataset, legend: Legend, settings: Settings, as_json: bool = False) -> None:
    """Evaluate each term through the same pipeline as the interactive loop.

    A quit term ends the run; later terms are not evaluated.
    """
    outcomes = []
    for term in terms:
        outcome = process_query(term, dataset, limit=settings.max_results)
        outcomes.append(outcome)
        if isinstance(outcome, Quit):
            break

    if as_json:
        payload = [outcome_to_dict(o) for o in outcomes]
        print(json.dumps(payload[0] if len(payload) == 1 else payload, indent=2))
        return

    for outcome in outcomes:
        print_outcome(outcome, legend)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        prog="glyph-db",
        description="Cross-reference lookup over assembly, drive, and Zendesk ticket snapshots.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py
  python main.py SN100
  python main.py SN100 --json
  python main.py '$1609459200000'
  DATA_DIR=/srv/exports python main.py
        """,
    )
    parser.add_argument(
        "terms",
        nargs="*",
        metavar="TERM",
        help="Run these lookups and exit instead of starting an interactive session",
    )
    parser.add_argument(
        "--data-dir",
        metavar="PATH",
        help="Directory holding ASM.json, DWE.json and ZEN.json (default: DATA_DIR or .)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit structured JSON for one-shot lookups",
    )
    parser.add_argument(
        "--no-summary",
        action="store_true",
        help="Skip the manufacturer / builder summary printed after loading",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable ANSI color codes in terminal output",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.data_dir:
        settings = settings.model_copy(update={"data_dir": Path(args.data_dir)})

    _configure_logging(settings.log_level)

    # Apply color preference before any output
    if args.no_color or args.json:
        disable_color()

    if args.json and not args.terms:
        parser.error("--json requires at least one TERM")

    quiet = args.json
    if not quiet:
        _announce("Glyph Database Started. Type Q to quit.", GREEN)

    if quiet:
        dataset = load_dataset(settings)
    else:
        dataset = load_with_progress(settings)

    summary = summarize(dataset, top=settings.top_n, reference_size=settings.parent_reference_size)
    legend = build_legend(summary)

    if not quiet and not args.no_summary:
        print_summary(summary, legend, top=settings.top_n)

    if args.terms:
        run_once(args.terms, dataset, legend, settings, as_json=args.json)
        return

    run_interactive(dataset, legend, settings)
    logger.info("Exiting Glyph Database. Goodbye!")


if __name__ == "__main__":
    main()
