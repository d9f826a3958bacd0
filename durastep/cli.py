"""Command line interface for durastep checkpoints."""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Optional

import typer

from durastep import WorkflowEngine, get_store
from durastep.errors import ProcessInitError
from durastep.persistence import initialize_store
from durastep.workflows.onboarding import SimulatedCrash, run_onboarding

app = typer.Typer(help="CLI for durastep durable workflows")

run_app = typer.Typer(help="Commands for inspecting checkpointed runs")

app.add_typer(run_app, name="run")


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", help="Logging level for durastep"),
) -> None:
    """durastep CLI entry point."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command("init")
def init() -> None:
    """
    Create the checkpoint schema for the configured database.

    Enables the configured journal mode (WAL by default) for SQLite.

    Example:
        durastep init
        DURASTEP_DATABASE_URL=sqlite://./engine.db durastep init
    """
    try:
        store = asyncio.run(initialize_store())
    except ProcessInitError as exc:
        typer.secho(f"Initialization failed: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    typer.echo(f"Checkpoint store ready ({type(store).__name__})")


@run_app.command("list")
def run_list() -> None:
    """
    List all runs that have checkpoints.

    Returns:
        Tab-separated run IDs and checkpoint counts, or "No runs found"

    Example:
        durastep run list
        # Output: hire_bob_002    4
    """
    store = get_store()
    runs = asyncio.run(store.list_runs())
    if not runs:
        typer.echo("No runs found")
        return
    for run in runs:
        typer.echo(f"{run.run_id}\t{run.step_count}")


@run_app.command("show")
def run_show(run_id: str) -> None:
    """
    Show the checkpointed steps of a run with their stored outputs.

    Example:
        durastep run show hire_bob_002
        # Output: Run hire_bob_002: 2 checkpoints
        #         - create_record_1: COMPLETED -> "HR_Record_Created"
        #         - provision_laptop_1: COMPLETED -> "MacBook_Shipped"
    """
    store = get_store()
    steps = asyncio.run(store.list_steps(run_id))
    if not steps:
        typer.echo("Run not found")
        raise typer.Exit(code=1)
    typer.echo(f"Run {run_id}: {len(steps)} checkpoints")
    for step in steps:
        typer.echo(f"- {step.step_key}: {step.status.value} -> {step.output}")


@run_app.command("reset")
def run_reset(run_id: str) -> None:
    """
    Delete every checkpoint of a run so that its next execution starts over.

    Example:
        durastep run reset hire_bob_002
    """
    store = get_store()
    removed = asyncio.run(store.delete_run(run_id))
    typer.echo(f"Removed {removed} checkpoints for run {run_id}")


@app.command("onboarding")
def onboarding(
    employee_name: str,
    run_id: Optional[str] = typer.Option(None, help="Run to start or resume"),
    simulate_crash: bool = typer.Option(
        False, help="Stop right after the first step is checkpointed"
    ),
    delay: float = typer.Option(0.5, help="Base duration of each simulated step"),
) -> None:
    """
    Run the example employee onboarding workflow.

    Run once with --simulate-crash, then again with the same --run-id: the
    HR record step is recovered from its checkpoint instead of running again.

    Example:
        durastep onboarding "Bob The Builder" --run-id hire_bob_002 --simulate-crash
        durastep onboarding "Bob The Builder" --run-id hire_bob_002
    """
    run_id = run_id or str(uuid.uuid4())
    typer.echo(f"Starting onboarding for {employee_name} (run {run_id})")

    async def _run():
        store = await initialize_store()
        engine = WorkflowEngine(run_id, store=store)
        return await run_onboarding(
            engine, employee_name, simulate_crash=simulate_crash, delay=delay
        )

    try:
        result = asyncio.run(_run())
    except ProcessInitError as exc:
        typer.secho(f"Initialization failed: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    except SimulatedCrash as exc:
        typer.secho(f"Crashed: {exc}", fg=typer.colors.RED)
        typer.echo(f"Resume with: durastep onboarding '{employee_name}' --run-id {run_id}")
        raise typer.Exit(code=1)

    typer.echo(f"Onboarding complete! Final status: {result.email}")


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    app()
