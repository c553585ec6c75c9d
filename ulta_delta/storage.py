from __future__ import annotations

import logging
from pathlib import Path

from ulta_delta.errors import FilesystemError


logger = logging.getLogger(__name__)


def save_config(content: str, path: str) -> str:
    """Overwrite `path` with `content` as UTF-8, byte for byte."""
    try:
        Path(path).write_bytes(content.encode("utf-8"))
    except OSError as exc:
        detail = exc.strerror or str(exc)
        raise FilesystemError(f"Failed to save config to {path}: {detail}") from exc
    logger.debug("Wrote %d characters to %s", len(content), path)
    return path
