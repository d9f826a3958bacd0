"""Example workflow bodies built on :class:`~durastep.engine.WorkflowEngine`."""

from .onboarding import OnboardingResult, SimulatedCrash, run_onboarding

__all__ = ["OnboardingResult", "SimulatedCrash", "run_onboarding"]
