import json
import stat
from pathlib import Path
from unittest.mock import patch

import pytest

from app.config.json_file_store import JsonFileConfigStore
from app.config.models import SessionConfig
from app.exceptions import ConfigStoreError

CONFIG = SessionConfig(
    extraction_endpoint="https://x.cognitiveservices.azure.com",
    extraction_key="azure-key",
    analysis_key="llm-key",
)


def _save_recording_modes(path: Path) -> list[int | None]:
    """Save CONFIG to `path`, recording the file mode at each write."""
    modes: list[int | None] = []
    original_write_text = Path.write_text

    def recording_write_text(self: Path, *args, **kwargs) -> int:
        modes.append(stat.S_IMODE(self.stat().st_mode) if self.exists() else None)
        return original_write_text(self, *args, **kwargs)

    with patch.object(Path, "write_text", recording_write_text):
        JsonFileConfigStore(path).save(CONFIG)
    return modes


class TestJsonFileConfigStore:
    def test_load_missing_file_returns_empty_config(self, tmp_path: Path) -> None:
        store = JsonFileConfigStore(tmp_path / "config.json")
        assert store.load() == SessionConfig()

    def test_save_then_load(self, tmp_path: Path) -> None:
        store = JsonFileConfigStore(tmp_path / "nested" / "config.json")
        store.save(CONFIG)
        assert store.load() == CONFIG

    def test_save_writes_readable_json_with_private_mode(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        JsonFileConfigStore(path).save(CONFIG)
        assert json.loads(path.read_text()) == CONFIG.to_dict()
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_credentials_are_never_written_to_a_readable_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("{}")
        path.chmod(0o644)
        modes_at_write = _save_recording_modes(path)

        assert modes_at_write == [0o600]
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_new_file_is_private_before_first_write(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        modes_at_write = _save_recording_modes(path)

        assert modes_at_write == [0o600]

    def test_save_overwrites_previous_config(self, tmp_path: Path) -> None:
        store = JsonFileConfigStore(tmp_path / "config.json")
        store.save(CONFIG)
        store.save(SessionConfig(analysis_key="other"))
        assert store.load() == SessionConfig(analysis_key="other")

    def test_missing_keys_default_to_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text('{"extraction_key": "k", "unrelated": 1}')
        assert JsonFileConfigStore(path).load() == SessionConfig(extraction_key="k")

    def test_invalid_json_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ConfigStoreError, match="Failed to read config file"):
            JsonFileConfigStore(path).load()

    def test_non_object_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigStoreError, match="must contain a JSON object"):
            JsonFileConfigStore(path).load()

    def test_unwritable_location_raises(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        store = JsonFileConfigStore(blocker / "config.json")
        with pytest.raises(ConfigStoreError, match="Failed to write config file"):
            store.save(CONFIG)
