"""Temporary media storage for multipart uploads."""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path

TEMP_SUFFIX = ".part"


@dataclass(slots=True)
class TempMediaStore:
    """Manages lifecycle of temporary upload files."""

    root: Path
    temp_ttl_seconds: int = 60 * 60
    log: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def ensure_structure(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def allocate(self) -> Path:
        """Return a fresh path for spooling one part to disk."""
        directory = self.ensure_structure()
        return directory / f"{uuid.uuid4().hex}{TEMP_SUFFIX}"

    def remove(self, path: Path) -> None:
        """Delete a temp artifact; failures are logged, never raised."""
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            self.log.warning(
                "media.temp.delete_failed",
                extra={"path": str(path), "error": str(exc)},
            )
            return
        self.log.debug("media.temp.removed", extra={"path": str(path)})

    def list_expired(self, reference_time: float | None = None) -> list[Path]:
        if not self.root.exists():
            return []
        now = reference_time if reference_time is not None else time.time()
        cutoff = now - self.temp_ttl_seconds
        expired: list[Path] = []
        for candidate in self.root.glob(f"*{TEMP_SUFFIX}"):
            try:
                if candidate.is_file() and candidate.stat().st_mtime <= cutoff:
                    expired.append(candidate)
            except FileNotFoundError:
                continue
        return expired

    def cleanup_expired(self, reference_time: float | None = None) -> int:
        """Purge temp files left behind past their TTL (fallback for cron)."""
        removed = 0
        for path in self.list_expired(reference_time):
            self.remove(path)
            if not path.exists():
                removed += 1
                self.log.info("media.temp.cleanup.removed", extra={"path": str(path)})
        return removed
