"""
Site file persistence — atomic writes for generated output.

Writes go to a temp file in the target directory, then rename, so a crash
mid-write never leaves a truncated script or manifest behind.
"""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def write_text(path: Path, content: str, *, mode: int = 0o644) -> None:
    """Write UTF-8 text to ``path`` atomically, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}_",
        suffix=".tmp",
    )
    tmp = Path(tmp_path)
    try:
        with open(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(content)
        tmp.chmod(mode)
        tmp.replace(path)
        logger.debug("Wrote %s", path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise


def write_json(path: Path, data: object) -> None:
    """Serialize ``data`` as indented JSON and write it atomically."""
    content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    write_text(path, content)
