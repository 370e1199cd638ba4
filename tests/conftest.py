"""Test configuration and fixtures for domainsweep."""

import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from domainsweep.modules.recon.models import EntryType, Severity, WordlistEntry
from domainsweep.modules.store import HistoryManager, MemoryStore


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def data_dir(monkeypatch, tmp_path: Path) -> Path:
    """Point the data directory at a scratch folder and drop inherited settings."""
    import os

    for key in list(os.environ):
        if key.startswith("DOMAINSWEEP_"):
            monkeypatch.delenv(key, raising=False)
    path = tmp_path / "data"
    monkeypatch.setenv("DOMAINSWEEP_DATA_DIR", str(path))
    return path


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def history(memory_store: MemoryStore) -> HistoryManager:
    return HistoryManager(memory_store)


@pytest.fixture
def env_entry() -> WordlistEntry:
    return WordlistEntry(
        path="/.env",
        type=EntryType.FILE,
        severity=Severity.CRITICAL,
        positive_match=("DB_PASSWORD", "APP_KEY"),
        false_positive_indicators=("<html",),
        description="Environment file exposed",
    )


@pytest.fixture
def backup_entry() -> WordlistEntry:
    return WordlistEntry(
        path="/backup/",
        type=EntryType.DIRECTORY,
        severity=Severity.MEDIUM,
        positive_match=("Index of",),
        description="Backup directory listing",
    )


@pytest.fixture
def sample_wordlist(env_entry: WordlistEntry, backup_entry: WordlistEntry) -> tuple:
    """Two-entry wordlist: a critical file and a medium directory listing."""
    return (env_entry, backup_entry)
