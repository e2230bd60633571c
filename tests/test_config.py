import pytest
from pydantic import ValidationError

from arxiv_linker.config import MAX_IN_QUERY_VALUES, Settings


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("ARXIV_LINKER_DB_PATH", "/tmp/linker.db")
    monkeypatch.setenv("ARXIV_LINKER_CHUNK_SIZE", "4")
    monkeypatch.setenv("ARXIV_LINKER_USER", "uid-7")
    settings = Settings(_env_file=None)
    assert settings.db_path == "/tmp/linker.db"
    assert settings.chunk_size == 4
    assert settings.user == "uid-7"
    assert settings.retry_attempts == 3


def test_chunk_size_cannot_exceed_store_limit(monkeypatch):
    monkeypatch.setenv("ARXIV_LINKER_CHUNK_SIZE", str(MAX_IN_QUERY_VALUES + 1))
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
