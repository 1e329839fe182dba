"""
CLI entry point for check-pv-usage.

Parses options and arguments, checks that kubectl can reach a cluster, then
lists PersistentVolumes or traces one volume to the workloads using it.
Run after setting cluster context (e.g. kx ctx use staging).
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import click

from .config import PV
from .kubectl import KubectlCluster, PrerequisiteError, check_prerequisites
from .output import Severity, emit
from .report import render_numbered_volumes, render_report, render_volume_list
from .tracer import trace_volume

# Shown at the bottom of check-pv-usage --help / check-pv-usage -h
EPILOG = """
Examples:

  check-pv-usage my-pv-name          # Check which workloads use my-pv-name
  check-pv-usage --list              # List PersistentVolumes (first 19)
  check-pv-usage --interactive       # Pick a PersistentVolume from a numbered list
  check-pv-usage -v my-pv-name       # Same as the first, logging every kubectl call

Run after setting cluster context (e.g. kx ctx use staging).
"""


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def check_volume(volume_name: str) -> None:
    """Trace volume_name against the current cluster and print the report."""
    render_report(trace_volume(volume_name, KubectlCluster()))


def interactive_mode() -> Optional[str]:
    """Show the numbered volume list and ask for a name; None when nothing was entered."""
    emit(Severity.HEADER, "Interactive PV Usage Checker")
    click.echo("Available PersistentVolumes:")
    render_numbered_volumes(KubectlCluster().list_resources(PV))
    click.echo()
    pv_name = click.prompt("Enter PV name to analyze", default="", show_default=False)
    return pv_name.strip() or None


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=EPILOG,
)
@click.option(
    "-l",
    "--list",
    "list_only",
    is_flag=True,
    help="List PersistentVolumes (at most 19)",
)
@click.option(
    "-i",
    "--interactive",
    is_flag=True,
    help="Interactive mode to select a PersistentVolume",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Log every kubectl call to stderr",
)
@click.argument("pv_name", metavar="PV_NAME", required=False)
@click.pass_context
def main(
    ctx: click.Context,
    list_only: bool,
    interactive: bool,
    verbose: bool,
    pv_name: Optional[str],
) -> None:
    """
    Check which deployments/workloads are using a PersistentVolume.

    Follows the volume to its claim, the pods mounting the claim and each
    pod's owner chain up to the top-level controller (Deployment,
    StatefulSet, DaemonSet, CronJob, ...).
    """
    setup_logging(verbose)

    if not (list_only or interactive or pv_name):
        emit(Severity.ERROR, "No arguments provided")
        click.echo(ctx.get_help())
        ctx.exit(1)

    try:
        check_prerequisites()
    except PrerequisiteError as exc:
        emit(Severity.ERROR, str(exc))
        ctx.exit(1)

    if list_only:
        render_volume_list(KubectlCluster().list_resources(PV))
        return

    if interactive:
        pv_name = interactive_mode()
        if not pv_name:
            emit(Severity.ERROR, "No PV name provided")
            ctx.exit(1)

    check_volume(pv_name)


if __name__ == "__main__":
    sys.exit(main())
