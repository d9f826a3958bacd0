import pytest

import durastep.persistence as persistence


@pytest.fixture(autouse=True)
def _isolated_store(tmp_path, monkeypatch):
    """Keep every test away from the caller's config and database files."""
    monkeypatch.delenv("DURASTEP_DATABASE_URL", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("DURASTEP_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(persistence, "_store_instance", None)
    yield
