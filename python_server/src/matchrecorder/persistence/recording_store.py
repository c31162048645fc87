"""Recording store — durable storage for serialized recordings.

Recordings are plain text files in one directory. Writes go to a
temporary file first and are atomically moved into place.
"""

from __future__ import annotations

import logging
from pathlib import Path

from matchrecorder.util.constants import RECORDING_FILE_SUFFIX

log = logging.getLogger(__name__)


def recording_filename(session_name: str, match_number: int, recording_number: int) -> str:
    """``{session}_match{n}recording{m}.cfg``"""
    return f"{session_name}_match{match_number}recording{recording_number}{RECORDING_FILE_SUFFIX}"


class RecordingStore:
    """Saves and loads named recording files.

    Args:
        directory: Folder holding the recordings (created on first save).
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def _path(self, name: str) -> Path:
        if not name or Path(name).name != name or name in (".", ".."):
            raise ValueError(f"Invalid recording name: {name!r}")
        return self.directory / name

    def save(self, name: str, text: str) -> Path:
        """Write ``text`` under ``name``, replacing any existing file."""
        out = self._path(name)
        self.directory.mkdir(parents=True, exist_ok=True)
        tmp = out.with_suffix(out.suffix + ".tmp")
        try:
            tmp.write_text(text, encoding="utf-8")
            tmp.replace(out)
            log.info("Recording saved to %s (%d bytes)", out, len(text))
        except Exception:
            log.exception("Failed to save recording to %s", out)
            if tmp.exists():
                tmp.unlink(missing_ok=True)
            raise
        return out

    def load(self, name: str) -> str:
        """Read a stored recording.

        Raises:
            FileNotFoundError: If no recording with that name exists.
        """
        return self._path(name).read_text(encoding="utf-8")

    def exists(self, name: str) -> bool:
        return self._path(name).exists()

    def names(self) -> list[str]:
        """Names of all stored recordings, sorted."""
        if not self.directory.exists():
            return []
        return sorted(p.name for p in self.directory.glob(f"*{RECORDING_FILE_SUFFIX}"))
