"""
JSON-file store (variant A): the pending email survives process restarts.

File layout: ``{"email": "a@b.com"}``. A missing or unreadable file reads as
no email, the same way the CLI treats a missing config file.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

from magic_login.errors import StorageError
from magic_login.models.state import PersistedRecord

logger = logging.getLogger(__name__)

DEFAULT_STATE_FILE = Path.home() / ".magic-login" / "state.json"


class FileEmailStore:
    def __init__(self, path: Path = DEFAULT_STATE_FILE):
        self._path = Path(path)

    def _load(self) -> PersistedRecord:
        try:
            return PersistedRecord.model_validate(json.loads(self._path.read_text()))
        except FileNotFoundError:
            return PersistedRecord()
        except OSError as e:
            raise StorageError(f"Failed to read {self._path}: {e}") from e
        except ValueError as e:
            logger.warning(f"Ignoring unreadable state file {self._path}: {e}")
            return PersistedRecord()

    def _save(self, record: PersistedRecord) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(record.model_dump_json())
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}") from e

    def _remove(self) -> None:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to remove {self._path}: {e}") from e

    async def write(self, email: str) -> None:
        await asyncio.to_thread(self._save, PersistedRecord(email=email))

    async def read(self) -> Optional[str]:
        record = await asyncio.to_thread(self._load)
        return record.email

    async def clear(self) -> None:
        await asyncio.to_thread(self._remove)
