"""Shared file helpers for the JSON-file-backed repositories.

Every write goes to a temporary file in the same directory and is then
renamed over the target, so a reader never sees a half-written file and a
failed write leaves the previous contents intact.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path

from storefront.domain.exceptions import PersistenceFailure


class JsonRecordFile:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        # Guards the file read-modify-write only; callers serialise per key.
        self.lock = threading.RLock()
        self._ensure_file()

    @property
    def path(self) -> Path:
        return self._file_path

    def load(self) -> list[dict]:
        try:
            return json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceFailure(f"Could not read {self._file_path.name}: {exc}") from exc

    def persist(self, records: list[dict]) -> None:
        payload = json.dumps(records, indent=2) + "\n"
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self._file_path.parent, prefix=f".{self._file_path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                os.replace(tmp_name, self._file_path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise PersistenceFailure(f"Could not write {self._file_path.name}: {exc}") from exc

    def _ensure_file(self) -> None:
        try:
            if not self._file_path.exists():
                self._file_path.parent.mkdir(parents=True, exist_ok=True)
                self._file_path.write_text("[]", encoding="utf-8")
        except OSError as exc:
            raise PersistenceFailure(f"Could not create {self._file_path}: {exc}") from exc
