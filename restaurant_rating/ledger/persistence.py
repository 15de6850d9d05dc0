from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from .errors import SnapshotError
from .models import LedgerSnapshot

logger = logging.getLogger(__name__)


def load_snapshot(path: Path) -> LedgerSnapshot | None:
    """Read a snapshot from *path*, or return ``None`` if the file is missing."""
    if not path.exists():
        return None
    try:
        return LedgerSnapshot.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as exc:
        raise SnapshotError(f"Cannot read ledger snapshot {path}: {exc}") from exc


def save_snapshot(path: Path, snapshot: LedgerSnapshot) -> None:
    """Write *snapshot* to *path* atomically (temp file + rename)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(snapshot.model_dump_json(indent=2))
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug("Saved ledger snapshot to %s", path)
