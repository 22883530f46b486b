from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from .analytics import history_rows
from .config import VARIANTS, BenchmarkConfig, driver_config_from_env
from .exceptions import CriticalStepError, SetupError
from .services import WorkflowBenchmark

logger = logging.getLogger("athenabench")

EXIT_OK = 0
EXIT_THRESHOLDS = 1
EXIT_ABORTED = 2


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="athenabench",
        description="Time the athenahealth SSO login, patient search and clinical workflow.",
    )
    ap.add_argument("--variant", choices=VARIANTS, default=None, help="Workflow variant (default: $ATHENA_VARIANT or search)")
    ap.add_argument("--url", default=None, help="Override $ATHENA_SANDBOX_URL")
    ap.add_argument("--search", default=None, help="Patient search term (default: '1xtest, amber')")
    ap.add_argument("--browser", choices=["chrome", "firefox"], default=None)
    ap.add_argument(
        "--headless",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Run the browser headless (default: $ATHENA_HEADLESS or on)",
    )
    ap.add_argument("--hold-open", type=float, default=0.0, help="Seconds to keep the final page open")
    ap.add_argument("--env-file", type=Path, default=None, help="Load variables from this .env file first")
    ap.add_argument("--history", action="store_true", help="Append step timings to data/shared/athena_runs.csv")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )
    load_dotenv(args.env_file)

    env = dict(os.environ)
    if args.url:
        env["ATHENA_SANDBOX_URL"] = args.url
    if args.variant:
        env["ATHENA_VARIANT"] = args.variant
    if args.search:
        env["ATHENA_PATIENT_SEARCH"] = args.search

    try:
        cfg = BenchmarkConfig.from_env(env)
    except (SetupError, ValueError) as exc:
        logger.error("%s", exc)
        return EXIT_ABORTED
    cfg.waits = replace(cfg.waits, hold_open_s=args.hold_open)

    driver_cfg = driver_config_from_env(env)
    if args.browser:
        driver_cfg.browser = args.browser
    if args.headless is not None:
        driver_cfg.headless = args.headless

    try:
        report = WorkflowBenchmark(driver_cfg, cfg).run()
    except CriticalStepError as exc:
        logger.error("Run aborted in %s: %s", exc.step, exc)
        return EXIT_ABORTED
    except SetupError as exc:
        logger.error("%s", exc)
        return EXIT_ABORTED

    if args.history:
        from shared_data import append_run

        path = append_run(history_rows(report))
        logger.info("Appended run to %s", path)

    return EXIT_OK if report.passed else EXIT_THRESHOLDS


if __name__ == "__main__":
    sys.exit(main())
