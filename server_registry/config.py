"""ServerRecord and ClientConfig — the data shapes shared by every module."""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict

DEFAULT_STATE_PATH = os.path.join(
    os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config")),
    "server-registry",
    "state.json",
)


class ServerRecord(BaseModel):
    """One managed game-server instance as the console knows it.

    Only ``id`` and ``enabled`` carry meaning here. Everything else the
    backend sends (name, description, status, player counts, connection
    config) rides along as extra fields and is merged and compared as-is.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    enabled: bool = False

    def merged(self, patch: dict[str, Any]) -> "ServerRecord":
        """Return a copy with ``patch`` shallow-merged over this record.

        Values are taken as-is, without validation, so merging never fails.
        """
        return self.model_copy(update=patch)


class ClientConfig(BaseModel):
    """Settings for a console session against one backend."""

    base_url: str
    timeout: float = 10.0
    headers: dict[str, str] = {}
    state_path: Optional[str] = None
    persist_active: bool = True

    @property
    def resolved_state_path(self) -> Path:
        return Path(self.state_path or DEFAULT_STATE_PATH).expanduser()


def load_config(path: str | Path) -> ClientConfig:
    """Load a ClientConfig from a YAML file, ignoring unknown keys."""
    path = Path(path)
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(
            f"Config file {path} must contain a mapping, got {type(data).__name__}"
        )

    filtered = {k: v for k, v in data.items() if k in ClientConfig.model_fields}
    return ClientConfig(**filtered)
