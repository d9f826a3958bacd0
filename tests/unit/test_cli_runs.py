import asyncio

from typer.testing import CliRunner

import durastep.persistence as persistence
from durastep.cli import app
from durastep.persistence import InMemoryCheckpointStore


def _setup_store() -> InMemoryCheckpointStore:
    store = InMemoryCheckpointStore()
    persistence._store_instance = store
    return store


def test_run_list_shows_runs_and_counts():
    store = _setup_store()
    asyncio.run(store.upsert("hire_bob_002", "create_record_1", '"HR_Record_Created"'))
    asyncio.run(store.upsert("hire_bob_002", "send_email_1", '"Email_Sent"'))
    asyncio.run(store.upsert("hire_ann_001", "create_record_1", '"HR_Record_Created"'))

    runner = CliRunner()
    result = runner.invoke(app, ["run", "list"])
    assert result.exit_code == 0, f"Command failed. Output: {result.stdout}"
    assert "hire_bob_002\t2" in result.stdout
    assert "hire_ann_001\t1" in result.stdout


def test_run_list_empty():
    _setup_store()

    result = CliRunner().invoke(app, ["run", "list"])
    assert result.exit_code == 0
    assert "No runs found" in result.stdout


def test_run_show_details_and_missing():
    store = _setup_store()
    asyncio.run(store.upsert("r1", "create_record_1", '"HR_Record_Created"'))

    runner = CliRunner()
    result = runner.invoke(app, ["run", "show", "r1"])
    assert result.exit_code == 0, f"Command failed. Output: {result.stdout}"
    assert "create_record_1: COMPLETED" in result.stdout
    assert "HR_Record_Created" in result.stdout

    missing = runner.invoke(app, ["run", "show", "missing-id"])
    assert missing.exit_code == 1
    assert "Run not found" in missing.stdout


def test_run_reset_removes_checkpoints():
    store = _setup_store()
    asyncio.run(store.upsert("r1", "a_1", '"A"'))
    asyncio.run(store.upsert("r1", "b_1", '"B"'))

    result = CliRunner().invoke(app, ["run", "reset", "r1"])
    assert result.exit_code == 0
    assert "Removed 2 checkpoints" in result.stdout
    assert asyncio.run(store.list_steps("r1")) == []


def test_onboarding_crash_then_resume():
    store = _setup_store()
    runner = CliRunner()
    args = ["onboarding", "Bob The Builder", "--run-id", "hire_bob_002", "--delay", "0"]

    crashed = runner.invoke(app, args + ["--simulate-crash"])
    assert crashed.exit_code == 1
    assert "Resume with" in crashed.stdout
    assert [s.step_key for s in asyncio.run(store.list_steps("hire_bob_002"))] == [
        "create_record_1"
    ]

    resumed = runner.invoke(app, args)
    assert resumed.exit_code == 0, f"Command failed. Output: {resumed.stdout}"
    assert "Final status: Email_Sent" in resumed.stdout
    assert len(asyncio.run(store.list_steps("hire_bob_002"))) == 4


def test_init_with_sqlite(tmp_path, monkeypatch):
    monkeypatch.setenv("DURASTEP_DATABASE_URL", f"sqlite://{tmp_path / 'cli.db'}")

    result = CliRunner().invoke(app, ["init"])
    assert result.exit_code == 0, f"Command failed. Output: {result.stdout}"
    assert "SQLiteCheckpointStore" in result.stdout
    assert (tmp_path / "cli.db").exists()


def test_init_reports_failure(monkeypatch):
    monkeypatch.setenv("DURASTEP_DATABASE_URL", "mongodb://localhost")

    result = CliRunner().invoke(app, ["init"])
    assert result.exit_code == 1
    assert "Initialization failed" in result.stdout
