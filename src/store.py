"""JSON key-value store for the journal.

The whole entry collection lives under a single key of a JSON document,
serialized and deserialized in one piece. Writes go through a temp file
and ``os.replace`` so a crash never leaves a half-written journal.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from dreamlog.errors import LoadReport
from dreamlog.models import DreamEntry

logger = logging.getLogger(__name__)

DEFAULT_STORE_KEY = "dreamcatcher-dreams"
DEFAULT_STORE_PATH = Path.home() / ".local" / "share" / "dreamlog" / "journal.json"


def atomic_write(path: Path, content: str) -> None:
    """Write ``content`` to ``path`` without exposing a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class JsonEntryStore:
    """Entry collection persisted as one JSON blob under ``key``.

    Other keys in the same document are preserved on save.
    """

    def __init__(self, path: Path, key: str = DEFAULT_STORE_KEY) -> None:
        self._path = Path(path)
        self._key = key
        self.last_report = LoadReport(source=str(self._path))

    @property
    def path(self) -> Path:
        return self._path

    def _read_document(self) -> dict[str, object]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
            logger.warning("Corrupt journal store at %s (%s), starting fresh", self._path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Unexpected journal store layout at %s, starting fresh", self._path)
            return {}
        return data

    def load_all(self) -> list[DreamEntry]:
        """Load every stored entry in stored order.

        Records that cannot be read are skipped and listed in
        ``last_report``.
        """
        report = LoadReport(source=str(self._path))
        raw = self._read_document().get(self._key, [])
        if not isinstance(raw, list):
            logger.warning("Journal key %r in %s is not a list, ignoring", self._key, self._path)
            raw = []

        entries: list[DreamEntry] = []
        seen_ids: set[str] = set()
        for index, record in enumerate(raw):
            record_id = str(record.get("id", "")) if isinstance(record, dict) else ""
            try:
                entry = DreamEntry.model_validate(record)
            except ValidationError as exc:
                reason = "; ".join(err["msg"] for err in exc.errors())
                report.add_issue(index, reason, record_id=record_id)
                continue
            if entry.id in seen_ids:
                report.add_issue(index, "duplicate id", record_id=entry.id)
                continue
            seen_ids.add(entry.id)
            entries.append(entry)

        report.loaded = len(entries)
        if report.issues:
            logger.warning("Skipped %d unreadable journal record(s) in %s", report.skipped, self._path)
        self.last_report = report
        return entries

    def save_all(self, entries: list[DreamEntry]) -> bool:
        """Replace the stored collection. Returns False if the write failed."""
        document = self._read_document()
        document[self._key] = [entry.model_dump(mode="json") for entry in entries]
        try:
            atomic_write(self._path, json.dumps(document, indent=2, ensure_ascii=False))
        except OSError as exc:
            logger.error("Could not save journal to %s: %s", self._path, exc)
            return False
        return True

    def append(self, entry: DreamEntry) -> bool:
        """Add a new entry at the front of the collection, newest first."""
        entries = self.load_all()
        return self.save_all([entry, *entries])
