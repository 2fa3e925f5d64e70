"""
CLI command for planning (dry-run) the desired state of a custom resource.
"""

import json
from typing import List, Optional

import yaml

from stagehand.cli.ux import console, header, print_table, success, warning
from stagehand.components.base import Readiness
from stagehand.config.loader import load_custom_resource, load_secret_snapshot
from stagehand.core.errors import ExitCode, main_with_error_handling
from stagehand.orchestration import ResolutionResult, TargetState
from stagehand.stores import InMemoryClusterStore

_READINESS_STYLE = {
    Readiness.READY: "[success]ready[/success]",
    Readiness.NOT_READY: "[warning]not ready[/warning]",
    Readiness.UNKNOWN: "[muted]unknown[/muted]",
}


def print_plan_summary(result: ResolutionResult, milestone: Optional[str]) -> None:
    """Print a summary of the desired state."""
    header(f"Plan: {result.custom_resource} (milestone: {milestone or 'unset'})")

    rows = [[kind, str(count)] for kind, count in result.resources_by_kind().items()]
    print_table("Resources", ["Kind", "Count"], rows)

    readiness_rows = [
        [name, _READINESS_STYLE[state]] for name, state in result.readiness.items()
    ]
    print_table("Components", ["Component", "Readiness"], readiness_rows)

    for name in result.skipped:
        warning(f"{name} skipped: required milestone not reached")
    for name in result.generated_secrets:
        console.print(f"  [info]+[/info] secret {name} will be generated")

    console.print()
    console.print(f"[bold]Total:[/bold] {result.total_resources} resources")
    if result.all_ready:
        success("All eligible components ready")


@main_with_error_handling()
def plan_command(
    custom_resource: str,
    secrets_file: Optional[str] = None,
    ready: Optional[List[str]] = None,
    output_format: str = "text",
) -> int:
    """
    Render the desired state of a custom resource without touching a cluster.

    Args:
        custom_resource: Path to the custom resource YAML file
        secrets_file: YAML mapping secret names to string data, treated as existing secrets
        ready: Workload names to report as ready
        output_format: text, yaml or json

    Returns:
        Exit code (0 when all eligible components are ready, 1 otherwise)
    """
    cr = load_custom_resource(custom_resource)
    store = InMemoryClusterStore(
        secrets=load_secret_snapshot(secrets_file) if secrets_file else {},
        ready_workloads=set(ready or []),
    )
    result = TargetState(cr, store, store).resolve()

    if output_format == "json":
        print(json.dumps(result.resources, indent=2))
    elif output_format == "yaml":
        print(yaml.safe_dump_all(result.resources, sort_keys=False), end="")
    else:
        print_plan_summary(result, cr.status.milestone)

    return ExitCode.SUCCESS if result.all_ready else ExitCode.WARNING
