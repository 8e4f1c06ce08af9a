# cli.py
"""
mircfg — render the control-flow graph of every function in an IR dump.

Usage examples:
  # one <function>.dot per function in ./cfg
  mircfg dump.json --out-dir cfg

  # all diagrams to stdout, keep going past broken functions
  mircfg dump.json --stdout --keep-going
"""
import argparse
import json
import logging
import sys
from pathlib import Path

from errors import CfgError, SinkError
from flowchart_generator import write
from ir_loader import load_program
from pipeline import RunConfig, run

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="mircfg", description="Render per-function CFGs from a JSON IR dump as DOT.")
    ap.add_argument("dump", help="JSON IR dump ('-' reads standard input)")
    ap.add_argument("--out-dir", default=".", help="directory for <function>.dot files (default: .)")
    ap.add_argument("--stdout", action="store_true", help="print all descriptions instead of writing files")
    ap.add_argument("--keep-going", action="store_true", help="skip failing functions instead of stopping")
    ap.add_argument("--metrics", action="store_true", help="print per-function CFG metrics as JSON to stderr")
    ap.add_argument("-v", "--verbose", action="store_true", help="log progress")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    out_dir = Path(args.out_dir)
    config = RunConfig(out_dir=out_dir, fail_fast=not args.keep_going, write_files=not args.stdout)

    try:
        program = load_program(sys.stdin if args.dump == "-" else args.dump)
        logger.info("loaded %d items from %s", len(program.items), args.dump)
        if config.write_files:
            out_dir.mkdir(parents=True, exist_ok=True)
        report = run(program, config)
    except (CfgError, OSError, ValueError) as exc:
        print(f"mircfg: error: {exc}", file=sys.stderr)
        return 1

    if args.stdout:
        try:
            for result in report.results:
                write(result.description, sys.stdout)
        except SinkError as exc:
            print(f"mircfg: error: {exc}", file=sys.stderr)
            return 1
    if args.metrics:
        json.dump({r.unit.name: r.metrics for r in report.results}, sys.stderr, indent=2)
        sys.stderr.write("\n")

    for unit, exc in report.failures:
        print(f"mircfg: skipped {unit.name}: {exc}", file=sys.stderr)
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
