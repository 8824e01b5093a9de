import json
from pathlib import Path

from app.config.models import SessionConfig
from app.config.store_base import BaseConfigStore
from app.exceptions import ConfigStoreError
from app.logging.logger import Log


class JsonFileConfigStore(BaseConfigStore):
    """Keeps the session configuration in a local JSON key-value file."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> SessionConfig:
        if not self._path.exists():
            return SessionConfig()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigStoreError(f"Failed to read config file {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigStoreError(f"Config file {self._path} must contain a JSON object")
        return SessionConfig(
            extraction_endpoint=str(data.get("extraction_endpoint") or ""),
            extraction_key=str(data.get("extraction_key") or ""),
            analysis_key=str(data.get("analysis_key") or ""),
        )

    def save(self, config: SessionConfig) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.touch(mode=0o600, exist_ok=True)
            self._path.chmod(0o600)
            self._path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
        except OSError as exc:
            raise ConfigStoreError(f"Failed to write config file {self._path}: {exc}") from exc
        Log.info(f"Saved session configuration to {self._path}")
