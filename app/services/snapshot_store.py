"""Storage of screenshots and JSON snapshots of scraped registry pages.

Files are laid out as ``<data folder>/<YYYY-MM-DD>/<jurisdiction>/<name>.{jpg,json}``.
Nothing here is ever read back by the API.
"""

import json
import logging
import re
from datetime import date
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r'[/\\?%*:|"<>]')


def sanitize_filename(name: str) -> str:
    """Replace characters that are not allowed in file names with dashes."""
    return _UNSAFE_FILENAME_CHARS.sub("-", name)


class SnapshotStore:
    """Writes per-request snapshots below a dated, per-jurisdiction folder."""

    def __init__(self, data_folder: str | Path) -> None:
        self.data_folder = Path(data_folder)

    def output_folder(self, jurisdiction: str, today: date | None = None) -> Path:
        """Return (and create) the folder for today's snapshots."""
        day = (today or date.today()).isoformat()
        folder = self.data_folder / day / jurisdiction.lower()
        folder.mkdir(parents=True, exist_ok=True)
        return folder

    def snapshot_paths(self, jurisdiction: str, name: str) -> tuple[Path, Path]:
        """Screenshot and JSON paths for a snapshot name."""
        folder = self.output_folder(jurisdiction)
        safe_name = sanitize_filename(name)
        return folder / f"{safe_name}.jpg", folder / f"{safe_name}.json"

    def save_json(self, path: Path, data: Any) -> None:
        """Write data as indented JSON.

        If the data cannot be serialized, an error document is written in its
        place so the snapshot folder still records the attempt.
        """
        try:
            payload = json.dumps(data, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to serialize snapshot {path.name}: {e}")
            payload = json.dumps(
                {"error": "Failed to serialize result", "details": str(e)}, indent=2
            )

        path.write_text(payload, encoding="utf-8")
        logger.info(f"Saved snapshot {path}")
