"""ActiveServerStorage — persists the active server across console restarts.

Only the active-server record survives a reload. It is kept in one JSON
file under a fixed key so the same file can hold other client state.
Losing the file, or failing to write it, is never fatal: the console just
starts without a remembered selection.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from server_registry.config import ServerRecord

logger = logging.getLogger(__name__)

STORAGE_KEY = "server-store"
ACTIVE_FIELD = "active_server"


class ActiveServerStorage:
    """JSON-file storage for the active ServerRecord.

    File layout::

        {"server-store": {"active_server": {"id": "...", "enabled": true, ...}}}

    Keys other than ``server-store`` are left untouched on write.
    """

    def __init__(self, path: str | Path, enabled: bool = True):
        self.path = Path(path)
        self.enabled = enabled

    def load(self) -> Optional[ServerRecord]:
        """Return the persisted active server, or None if there is none usable."""
        if not self.enabled:
            return None

        document = self._read()
        section = document.get(STORAGE_KEY)
        if not isinstance(section, dict):
            return None

        raw = section.get(ACTIVE_FIELD)
        if raw is None:
            return None
        if not isinstance(raw, dict):
            logger.warning(
                f"Ignoring persisted active server in {self.path}: "
                f"expected an object, got {type(raw).__name__}"
            )
            return None

        try:
            record = ServerRecord.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring persisted active server in {self.path}: {e}")
            return None

        logger.info(f"Restored active server {record.id} from {self.path}")
        return record

    def save(self, record: Optional[ServerRecord]) -> None:
        """Write a snapshot of ``record`` (or null) under the storage key."""
        if not self.enabled:
            return

        document = self._read()
        section = document.get(STORAGE_KEY)
        if not isinstance(section, dict):
            section = {}
        try:
            snapshot = record.model_dump(mode="json") if record is not None else None
        except PydanticSerializationError as e:
            logger.warning(f"Cannot persist active server {record.id}: {e}")
            return
        section[ACTIVE_FIELD] = snapshot
        document[STORAGE_KEY] = section

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as fh:
                json.dump(document, fh, indent=2)
            logger.debug(
                f"Persisted active server "
                f"{record.id if record is not None else None} to {self.path}"
            )
        except OSError as e:
            logger.warning(f"Failed to persist active server to {self.path}: {e}")

    def _read(self) -> dict[str, Any]:
        try:
            with open(self.path, encoding="utf-8") as fh:
                document = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable state file {self.path}: {e}")
            return {}

        if not isinstance(document, dict):
            logger.warning(f"Unexpected state file shape in {self.path}, ignoring")
            return {}
        return document
