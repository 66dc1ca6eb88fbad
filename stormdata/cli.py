"""CLI entrypoint for the storm events impact analysis."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from stormdata.acquire.fetch import run_fetch
from stormdata.common.config_loader import ConfigBundle, load_all_configs
from stormdata.common.constants import EXIT_HARD_FAIL, EXIT_SUCCESS, STAGES
from stormdata.common.errors import PipelineError
from stormdata.common.logging import build_logger, close_logger, log_event, timed_stage
from stormdata.common.time_utils import generate_run_id
from stormdata.pipeline.normalise import run_normalise
from stormdata.pipeline.reports import run_report


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=[*STAGES, "all"])
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    return parser.parse_args(argv)


def stages_for(command: str) -> tuple[str, ...]:
    # Later stages consume the in-memory output of earlier ones.
    if command == "all":
        return STAGES
    return STAGES[: STAGES.index(command) + 1]


def execute_stage(
    stage: str,
    bundle: ConfigBundle,
    data_dir: Path,
    run_id: str,
    state: dict,
    logger: logging.Logger,
) -> None:
    with timed_stage(logger, run_id, stage) as fields:
        if stage == "fetch":
            path = run_fetch(bundle.analysis, data_dir, logger=logger, run_id=run_id)
            fields["path"] = str(path)
        elif stage == "normalise":
            normalised = run_normalise(bundle, data_dir, run_id)
            state["normalised"] = normalised
            fields["rows_in"] = normalised["raw_row_count"]
            fields["rows_out"] = normalised["filtered_row_count"]
            fields["unmatched_rate"] = round(normalised["unmatched_rate"], 6)
        elif stage == "report":
            summary = run_report(state["normalised"], bundle.analysis, data_dir)
            fields["rows_in"] = summary["counts"]["filtered_rows"] - summary["counts"]["unmatched_rows"]
            fields["rows_out"] = summary["counts"]["categories"]
            for warning in summary["warnings"]:
                log_event(
                    logger,
                    f"report warning: {warning}",
                    level=logging.WARNING,
                    run_id=run_id,
                    stage=stage,
                    event="REPORT_WARNING",
                    status="warning",
                    unmatched_rate=summary["unmatched_rate"],
                )
        else:
            raise ValueError(f"Unknown stage: {stage}")


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    config_dir = Path(args.config_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    data_dir = Path(args.data_dir)

    logger = build_logger(run_id, data_dir=data_dir, level=args.log_level)
    state: dict = {}
    stage = "config"
    try:
        bundle = load_all_configs(config_dir, overlay_config_dir=overlay_config_dir)
        for stage in stages_for(args.command):
            execute_stage(stage, bundle, data_dir, run_id, state, logger)
    except PipelineError as exc:
        log_event(
            logger,
            f"stage failed: {exc}",
            level=logging.ERROR,
            run_id=run_id,
            stage=stage,
            event="STAGE_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        return EXIT_HARD_FAIL
    except Exception as exc:
        log_event(
            logger,
            f"unexpected failure: {exc!r}",
            level=logging.ERROR,
            run_id=run_id,
            stage=stage,
            event="STAGE_FAIL",
            status="error",
            error_code="UNEXPECTED_ERROR",
        )
        return EXIT_HARD_FAIL
    finally:
        close_logger(logger)
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    return run_command(args)


if __name__ == "__main__":
    raise SystemExit(main())
