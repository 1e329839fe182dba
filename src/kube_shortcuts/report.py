"""
Text rendering for check-pv-usage.

render_report() prints a TraceReport section by section; render_volume_list()
and render_numbered_volumes() print the PersistentVolume listings used by
--list and --interactive.
"""

from __future__ import annotations

from typing import Sequence

import click

from .config import LIST_LIMIT, PV_INTERACTIVE_COLUMNS, PV_LIST_COLUMNS
from .models import Claim, Volume, dig
from .output import Severity, emit, format_table
from .tracer import Outcome, PodTrace, TraceReport

NONE = "<none>"


def _cell(value: str) -> str:
    return value if value else NONE


def _volume_table(volume: Volume) -> list[str]:
    claim = volume.claim_ref
    return format_table(
        ["NAME", "STATUS", "CLAIM", "NAMESPACE", "CAPACITY", "STORAGECLASS", "CREATED"],
        [[
            _cell(volume.name),
            _cell(volume.phase),
            _cell(claim.name if claim else ""),
            _cell(claim.namespace if claim else ""),
            _cell(volume.capacity),
            _cell(volume.storage_class),
            _cell(volume.created),
        ]],
    )


def _claim_table(claim: Claim) -> list[str]:
    modes = f"[{' '.join(claim.access_modes)}]" if claim.access_modes else ""
    return format_table(
        ["NAME", "STATUS", "VOLUME", "CAPACITY", "ACCESSMODES", "STORAGECLASS", "CREATED"],
        [[
            _cell(claim.name),
            _cell(claim.phase),
            _cell(claim.volume_name),
            _cell(claim.capacity),
            _cell(modes),
            _cell(claim.storage_class),
            _cell(claim.created),
        ]],
    )


def _echo_lines(lines: Sequence[str]) -> None:
    for line in lines:
        click.echo(line)


def render_pod(trace: PodTrace) -> None:
    pod = trace.pod
    click.echo()
    emit(Severity.INFO, f"Analyzing Pod: {pod.name}")
    click.echo(f"  Status: {pod.phase}")
    click.echo(f"  Node: {pod.node}")
    click.echo(f"  Created: {pod.created}")

    if trace.standalone:
        emit(Severity.WARNING, f"  Pod '{pod.name}' has no owner (standalone pod)")
        return

    click.echo(f"  Immediate Owner: {trace.owner}")
    click.echo(f"  Top-level Controller: {trace.top_level}")
    if trace.replicas is not None:
        click.echo(f"    Replicas: {trace.replicas.ratio()}")

    emit(Severity.INFO, "  Volume Mount Details:")
    for mount in trace.mounts:
        click.echo(
            f"    Container: {mount.container} | Mount Path: {mount.mount_path} | Volume: {mount.volume_name}"
        )


def render_report(report: TraceReport) -> None:
    """Print a trace from the volume header down to the last pod analysed."""
    emit(Severity.HEADER, f"PV Usage Check: {report.volume_name}")
    if report.outcome is Outcome.NOT_FOUND or report.volume is None:
        emit(Severity.ERROR, f"PersistentVolume '{report.volume_name}' not found")
        return

    volume = report.volume
    emit(Severity.INFO, "Basic PV Information:")
    _echo_lines(_volume_table(volume))

    if report.outcome is Outcome.UNBOUND or volume.claim_ref is None:
        emit(Severity.WARNING, f"PV '{volume.name}' is not bound to any PVC (Status: {volume.phase})")
        return

    claim_ref = volume.claim_ref
    emit(Severity.SUCCESS, f"PV is bound to PVC: {claim_ref.name} in namespace: {claim_ref.namespace}")

    if report.outcome is Outcome.DANGLING or report.claim is None:
        emit(Severity.WARNING, f"PVC '{claim_ref.name}' not found in namespace '{claim_ref.namespace}'")
        emit(Severity.WARNING, "This might indicate a dangling PV reference")
        return

    click.echo()
    emit(Severity.INFO, "PVC Details:")
    _echo_lines(_claim_table(report.claim))

    click.echo()
    emit(Severity.INFO, f"Searching for pods using PVC '{claim_ref.name}'...")
    if report.outcome is Outcome.UNMOUNTED:
        emit(Severity.WARNING, f"No pods found using PVC '{claim_ref.name}'")
        emit(Severity.INFO, "The PVC exists but is not mounted by any pods")
        return

    emit(Severity.SUCCESS, "Found pods using this PVC:")
    for trace in report.pods:
        render_pod(trace)


def _rows(items: list[dict], columns: list[tuple[str, str]]) -> list[list[str]]:
    rows = []
    for item in items:
        row = []
        for _, path in columns:
            value = dig(item, path)
            row.append(NONE if value in (None, "") else str(value))
        rows.append(row)
    return rows


def render_volume_list(items: list[dict], limit: int = LIST_LIMIT) -> None:
    """
    Print at most `limit` volumes as a table.

    When the cluster holds more, say how many there are in total.
    """
    emit(Severity.HEADER, "Available PersistentVolumes")
    headers = [header for header, _ in PV_LIST_COLUMNS]
    _echo_lines(format_table(headers, _rows(items[:limit], PV_LIST_COLUMNS)))
    total = len(items)
    if total > limit:
        emit(Severity.INFO, f"Showing first {limit} PVs out of {total} total PVs")
        emit(Severity.INFO, "Use 'kubectl get pv' to see all PVs")


def render_numbered_volumes(items: list[dict]) -> None:
    """Numbered, header-less listing for interactive selection."""
    lines = format_table([], _rows(items, PV_INTERACTIVE_COLUMNS))
    for number, line in enumerate(lines, start=1):
        click.echo(f"{number:>6}  {line}")
