"""Ralph Ultra CLI entry point."""
from __future__ import annotations

import json
import logging

import click

from ralph_ultra.model.enums import ExecutionMode, TaskType

MODES = [m.value for m in ExecutionMode]
TASK_TYPES = [t.value for t in TaskType]


def _quota_manager(config):
    from ralph_ultra.quota import CredentialResolver, ProviderChecks, QuotaManager

    checks = ProviderChecks(config, CredentialResolver(config.credential_store))
    return QuotaManager(checks, ttl_seconds=config.cache_ttl_seconds)


def _learning(config):
    from ralph_ultra.learning import LearningRecorder
    from ralph_ultra.store import JsonFileStore

    return LearningRecorder(JsonFileStore(config.learning_file))


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Ralph Ultra: model allocation for autonomous coding agents."""
    from ralph_ultra.config import RalphConfig

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = RalphConfig.from_env()


@cli.command()
@click.option("--force", is_flag=True, help="Ignore the cached snapshot")
@click.pass_obj
def quotas(config, force: bool) -> None:
    """Check remaining capacity for every provider."""
    snapshot = _quota_manager(config).refresh_all_quotas(force=force)
    for provider, quota in snapshot.items():
        line = f"{provider.value:<11} {quota.status.value:<12} {quota.quota_type.value}"
        if quota.usage_percent is not None:
            line += f"  {quota.usage_percent:.1f}% used"
        if quota.credits_remaining is not None:
            line += f"  ${quota.credits_remaining:.2f} credits"
        if quota.tokens_remaining is not None:
            line += f"  {quota.tokens_remaining} tokens left"
        if quota.error:
            line += f"  ({quota.error})"
        click.echo(line)


@cli.command()
@click.argument("backlog_json", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--mode",
    type=click.Choice(MODES),
    default=ExecutionMode.BALANCED.value,
    show_default=True,
    help="Execution mode",
)
@click.option("--no-quotas", is_flag=True, help="Plan without checking provider quotas")
@click.option("--json", "as_json", is_flag=True, help="Print the plan as JSON")
@click.pass_obj
def plan(config, backlog_json: str, mode: str, no_quotas: bool, as_json: bool) -> None:
    """Generate an execution plan for a backlog JSON file."""
    from pathlib import Path

    from ralph_ultra.model.task import Backlog
    from ralph_ultra.planner import ExecutionPlanner

    try:
        data = json.loads(Path(backlog_json).read_text(encoding="utf-8"))
    except ValueError as exc:
        raise click.ClickException(f"Invalid backlog JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise click.ClickException("Backlog must be a JSON object")
    try:
        backlog = Backlog.from_dict(data)
    except KeyError as exc:
        raise click.ClickException(f"Invalid backlog: story is missing {exc}") from exc
    except (AttributeError, TypeError, ValueError) as exc:
        raise click.ClickException(f"Invalid backlog: {exc}") from exc

    snapshot = None if no_quotas else _quota_manager(config).refresh_all_quotas()
    planner = ExecutionPlanner(learning=_learning(config))
    result = planner.generate_plan(
        backlog,
        snapshot,
        ExecutionMode(mode),
        project_path=str(Path(backlog_json).resolve().parent),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    click.echo(f"Plan for {result.project_name} ({result.mode.value})")
    for alloc in result.allocations:
        click.echo(
            f"  {alloc.story_id:<10} {alloc.task_type.value:<20} "
            f"{alloc.model.model_id:<28} ${alloc.estimated_cost:.2f}  "
            f"{alloc.estimated_duration:.0f}m"
        )
    summary = result.summary
    click.echo(
        f"Total: {summary.total_stories} tasks, ${summary.estimated_total_cost:.2f}, "
        f"{summary.estimated_total_duration:.0f} min"
    )
    if not summary.can_complete_with_current_quotas:
        click.echo("Current quotas are not sufficient to complete this plan")
    for warning in summary.quota_warnings:
        click.echo(f"Warning: {warning}")
    comp = result.comparisons
    for label, strategy in (
        ("all premium", comp.all_premium),
        ("all local", comp.all_local),
        ("super saver", comp.super_saver),
        ("fast delivery", comp.fast_delivery),
    ):
        click.echo(f"  {label:<14} ${strategy.cost:.2f}  {strategy.duration:.0f} min")


@cli.command()
@click.argument("task_type", type=click.Choice(TASK_TYPES))
@click.option("--min-runs", default=3, type=int, show_default=True, help="Minimum recorded runs")
@click.pass_obj
def best(config, task_type: str, min_runs: int) -> None:
    """Show the best-scoring model for a task type."""
    learning = _learning(config).get_best_model_for_task(TaskType(task_type), min_runs)
    if learning is None:
        click.echo(f"No model has {min_runs}+ recorded runs for {task_type}")
        return
    click.echo(
        f"{learning.provider.value}:{learning.model_id} "
        f"score {learning.overall_score:.1f}, "
        f"{learning.total_runs} runs, "
        f"{learning.success_rate:.0%} success"
    )


@cli.command()
@click.pass_obj
def costs(config) -> None:
    """Summarize the persisted cost history."""
    from ralph_ultra.costs import CostTracker
    from ralph_ultra.store import JsonFileStore

    history = CostTracker(JsonFileStore(config.cost_history_file)).get_all_history()
    if not history:
        click.echo("No cost history recorded")
        return
    estimated = sum(r.estimated_cost for r in history)
    actual = sum(r.actual_cost for r in history)
    successful = sum(1 for r in history if r.success)
    click.echo(f"Tasks: {len(history)} ({successful} successful)")
    click.echo(f"Estimated: ${estimated:.2f}")
    click.echo(f"Actual:    ${actual:.2f}")
