"""Run the scheduling jobs from the command line.

Without arguments a single tick (reminders, overdue, dispatch) is executed.
``--serve`` starts the background scheduler and blocks until interrupted.
"""

from __future__ import annotations

import argparse
import logging
import time
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from taskboard.application.jobs import JOB_NAMES, JobRunner
from taskboard.config import get_settings
from taskboard.infrastructure.database import SessionLocal, initialize_database
from taskboard.infrastructure.email import SendGridChannel
from taskboard.infrastructure.scheduler import shutdown_scheduler, start_scheduler
from taskboard.utils import ensure_app_timezone


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for the job runner."""

    parser = argparse.ArgumentParser(
        description="Run the Taskboard reminder, overdue and delivery jobs.",
    )
    parser.add_argument(
        "--job",
        choices=JOB_NAMES,
        default=None,
        help="Run only this job (default: one full tick)",
    )
    parser.add_argument(
        "--now",
        type=datetime.fromisoformat,
        default=None,
        help="ISO timestamp to use as the current time (app timezone if naive)",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Start the periodic scheduler and keep running until interrupted",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    return parser.parse_args()


def main() -> None:
    """Execute the requested jobs using the configured database and mail channel."""

    args = parse_args()
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = get_settings()
    initialize_database()
    runner = JobRunner(
        SessionLocal,
        SendGridChannel(),
        grace_minutes=settings.reminder_grace_minutes,
    )

    if args.serve:
        scheduler = start_scheduler(runner, settings.model_copy(update={"enable_scheduler": True}))
        if scheduler is None:
            raise SystemExit("The scheduler could not be started.")
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            pass
        finally:
            shutdown_scheduler()
        return

    now = ensure_app_timezone(args.now)
    jobs = {
        "reminders": runner.run_reminders,
        "overdue": runner.run_overdue,
        "dispatch": runner.run_dispatch,
        "digest": runner.run_digest,
    }
    try:
        if args.job:
            results = {args.job: jobs[args.job](now)}
        else:
            results = runner.run_tick(now)
    except SQLAlchemyError as exc:
        raise SystemExit(f"Database error while running jobs: {exc}") from exc

    for name, result in results.items():
        if result is None:
            print(f"{name}: skipped")
        elif isinstance(result, int):
            print(f"{name}: {result}")
        else:
            print(f"{name}: {len(result)}")


if __name__ == "__main__":
    main()
