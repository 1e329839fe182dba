"""
Terminal output helpers.

styled() turns a severity and a message into a prefixed, coloured line;
emit() prints it. click.echo drops the colour codes when stdout is not a
terminal, so redirected output stays plain text.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

import click


class Severity(Enum):
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"
    HEADER = "HEADER"


_COLOURS = {
    Severity.INFO: "blue",
    Severity.SUCCESS: "green",
    Severity.WARNING: "yellow",
    Severity.ERROR: "red",
    Severity.HEADER: "magenta",
}


def styled(severity: Severity, message: str) -> str:
    """Return message with its severity prefix, e.g. "[WARNING] ..." (headers become "=== message ===")."""
    colour = _COLOURS[severity]
    if severity is Severity.HEADER:
        return click.style(f"=== {message} ===", fg=colour)
    bold = severity is Severity.WARNING
    return f"{click.style(f'[{severity.value}]', fg=colour, bold=bold)} {message}"


def emit(severity: Severity, message: str) -> None:
    click.echo(styled(severity, message))


def format_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    indent: str = "",
) -> list[str]:
    """
    Lay out rows as left-aligned columns sized to the widest cell.

    Args:
        headers: Column headers; pass an empty sequence for a header-less table.
        rows: Table rows, each with one cell per column.
        indent: Prefix for every line.

    Returns:
        Lines without trailing whitespace.
    """
    ncols = len(headers) if headers else max((len(r) for r in rows), default=0)
    widths = [0] * ncols
    for line in ([list(headers)] if headers else []) + [list(r) for r in rows]:
        for i, cell in enumerate(line[:ncols]):
            widths[i] = max(widths[i], len(cell))
    fmt = indent + "   ".join(f"{{{i}:<{w}}}" for i, w in enumerate(widths))
    out = []
    if headers:
        out.append(fmt.format(*headers).rstrip())
    for row in rows:
        cells = list(row) + [""] * (ncols - len(row))
        out.append(fmt.format(*cells[:ncols]).rstrip())
    return out
