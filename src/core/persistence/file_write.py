"""
Atomic file writes for generated artifacts.

Writes go to a temp file in the destination directory and are then
renamed over the target, so readers see either the old file or the
complete new one, never a partial write.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def write_atomic(path: Path, content: str, prefix: str = ".devbase_") -> None:
    """Replace ``path`` with ``content`` (atomic write).

    Args:
        path: Target file. Parent directories are created.
        content: Full text to write.
        prefix: Temp file prefix.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=prefix, suffix=".tmp")
        os.close(fd)
        tmp = Path(tmp_path)
        try:
            tmp.write_text(content, encoding="utf-8")
            tmp.replace(path)
            logger.debug("Wrote %s", path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise
    except Exception as e:
        logger.error("Failed to write %s: %s", path, e)
        raise
