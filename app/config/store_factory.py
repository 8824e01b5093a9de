from pathlib import Path

from app.config.json_file_store import JsonFileConfigStore
from app.config.settings import Settings
from app.config.store_base import BaseConfigStore
from app.database.repositories.session_config_repository import SessionConfigRepository


class ConfigStoreFactory:
    """Creates the configured session configuration store."""

    @classmethod
    def create(cls, settings: Settings) -> BaseConfigStore:
        kind = settings.config_store.lower()
        if kind == "file":
            return JsonFileConfigStore(Path(settings.config_store_path).expanduser())
        if kind == "postgres":
            return SessionConfigRepository(profile=settings.config_profile)
        raise ValueError(f"Unknown config store '{kind}'. Choose from: ['file', 'postgres']")
