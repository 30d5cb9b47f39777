from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from .generator import OUTPUT_FILENAME, run_generation
from .verify import DEFAULT_REL_TOL, verify_fixture


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="haversine-fixture", description="Haversine reference fixture generator")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("generate", help=f"Write the seeded pair dataset to ./{OUTPUT_FILENAME} and print its reference sum")

    ver = sub.add_parser("verify", help="Recompute the reference sum of a pairs JSON file")
    ver.add_argument("path", type=Path, nargs="?", default=Path(OUTPUT_FILENAME))
    ver.add_argument("--expected-sum", type=float, default=None)
    ver.add_argument("--rel-tol", type=float, default=DEFAULT_REL_TOL)

    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))

    if args.cmd == "generate":
        summary = run_generation(Path(OUTPUT_FILENAME))
        print(f"Expected sum: {summary.expected_sum}")
        print(f"N: {summary.count}")
        return 0

    if args.cmd == "verify":
        report = verify_fixture(args.path, expected_sum=args.expected_sum, rel_tol=float(args.rel_tol))
        print(json.dumps(report, indent=2, sort_keys=True))
        return 0 if report["status"] == "OK" else 1

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
