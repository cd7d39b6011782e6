"""Cron entry point for sweeping orphaned multipart temp files."""

from __future__ import annotations

import argparse
import sys
import time
from dataclasses import dataclass

from upload_gateway.config import AppConfig, load_config
from upload_gateway.logging import configure_logging
from upload_gateway.media.temp_media_store import TempMediaStore


@dataclass(slots=True)
class CleanupSummary:
    temp_removed: int
    dry_run: bool


def perform_cleanup(
    *,
    dry_run: bool,
    max_age_seconds: int | None = None,
    reference_time: float | None = None,
    config: AppConfig | None = None,
) -> CleanupSummary:
    """Execute cleanup logic and return summary counters."""
    config = config or load_config()
    temp_store = TempMediaStore(
        root=config.temp_dir,
        temp_ttl_seconds=max_age_seconds or config.temp_ttl_seconds,
    )

    now = reference_time if reference_time is not None else time.time()

    if dry_run:
        return CleanupSummary(temp_removed=len(temp_store.list_expired(now)), dry_run=True)

    return CleanupSummary(temp_removed=temp_store.cleanup_expired(now), dry_run=False)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Remove temp upload files left behind by crashed requests.")
    parser.add_argument("--dry-run", action="store_true", help="Only report counts without deleting files.")
    parser.add_argument(
        "--max-age-seconds",
        type=int,
        default=None,
        help="Override UPLOAD_TEMP_TTL_SECONDS for this run.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or [])
    try:
        config = load_config()
        configure_logging(config.log_level)
        summary = perform_cleanup(
            dry_run=args.dry_run,
            max_age_seconds=args.max_age_seconds,
            config=config,
        )
    except Exception as exc:
        print(f"cleanup failed: {exc}", file=sys.stderr)
        return 2

    if summary.dry_run:
        print(f"cleanup dry-run, temp_expired={summary.temp_removed}", file=sys.stdout)
    else:
        print(f"cleanup done, temp_removed={summary.temp_removed}", file=sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
