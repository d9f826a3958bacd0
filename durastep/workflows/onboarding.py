"""Employee onboarding: a workflow mixing sequential and parallel steps."""

from __future__ import annotations

import asyncio
import logging

from pydantic import BaseModel

from ..engine import WorkflowEngine

logger = logging.getLogger(__name__)


class SimulatedCrash(RuntimeError):
    """Raised to stop the workflow after the first checkpoint, as a power loss would."""


class OnboardingResult(BaseModel):
    record: str
    laptop: str
    access: str
    email: str


async def run_onboarding(
    engine: WorkflowEngine,
    employee_name: str,
    simulate_crash: bool = False,
    delay: float = 0.5,
) -> OnboardingResult:
    """Onboard ``employee_name``.

    The HR record is created first, the laptop and access provisioning run
    concurrently, and the welcome email goes out once both are done. With
    ``simulate_crash`` the run stops right after the HR record is
    checkpointed; running again with the same run id resumes from there.
    """

    async def create_record() -> str:
        logger.info(f"Creating HR record for {employee_name}")
        await asyncio.sleep(delay * 2)
        return "HR_Record_Created"

    async def provision_laptop() -> str:
        logger.info("Ordering laptop")
        await asyncio.sleep(delay * 4)
        return "MacBook_Shipped"

    async def provision_access() -> str:
        logger.info("Granting AWS and GitHub access")
        await asyncio.sleep(delay * 3)
        return "Access_Granted"

    async def send_email() -> str:
        logger.info(f"Sending welcome email to {employee_name}")
        await asyncio.sleep(delay)
        return "Email_Sent"

    record = await engine.step("create_record", create_record, str)

    if simulate_crash:
        raise SimulatedCrash("Power loss simulated after create_record")

    laptop, access = await asyncio.gather(
        engine.step("provision_laptop", provision_laptop, str),
        engine.step("provision_access", provision_access, str),
    )
    logger.info("Both provisioning steps completed")

    email = await engine.step("send_email", send_email, str)

    return OnboardingResult(record=record, laptop=laptop, access=access, email=email)
