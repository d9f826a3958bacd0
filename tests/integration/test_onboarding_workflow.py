import pytest

from durastep import WorkflowEngine
from durastep.persistence import SQLiteCheckpointStore
from durastep.workflows import OnboardingResult, SimulatedCrash, run_onboarding


class RecordingStore(SQLiteCheckpointStore):
    """SQLite store that remembers which keys this process wrote."""

    def __init__(self, db_path):
        super().__init__(db_path)
        self.written: list[str] = []

    async def upsert(self, run_id, step_key, output):
        await super().upsert(run_id, step_key, output)
        self.written.append(step_key)


@pytest.mark.asyncio
async def test_onboarding_resumes_after_crash(tmp_path):
    db_path = tmp_path / "durable_engine.db"

    first = RecordingStore(db_path)
    with pytest.raises(SimulatedCrash):
        await run_onboarding(
            WorkflowEngine("hire_bob_002", store=first),
            "Bob The Builder",
            simulate_crash=True,
            delay=0,
        )
    assert first.written == ["create_record_1"]
    first.close()

    second = RecordingStore(db_path)
    result = await run_onboarding(
        WorkflowEngine("hire_bob_002", store=second), "Bob The Builder", delay=0
    )

    assert result == OnboardingResult(
        record="HR_Record_Created",
        laptop="MacBook_Shipped",
        access="Access_Granted",
        email="Email_Sent",
    )
    assert "create_record_1" not in second.written
    assert sorted(second.written) == [
        "provision_access_1",
        "provision_laptop_1",
        "send_email_1",
    ]
    assert second.written[-1] == "send_email_1"
    assert len(await second.list_steps("hire_bob_002")) == 4


@pytest.mark.asyncio
async def test_completed_onboarding_replays_everything(tmp_path):
    db_path = tmp_path / "durable_engine.db"
    await run_onboarding(
        WorkflowEngine("hire_ann_001", store=RecordingStore(db_path)), "Ann", delay=0
    )

    replay_store = RecordingStore(db_path)
    result = await run_onboarding(
        WorkflowEngine("hire_ann_001", store=replay_store), "Ann", delay=0
    )

    assert result.email == "Email_Sent"
    assert replay_store.written == []
