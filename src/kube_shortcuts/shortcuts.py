"""
kx: everyday kubectl shortcuts.

Context and namespace switching (direct or from a numbered menu), a cluster
summary and a multi-resource overview. Each command is one or a few kubectl
calls whose output is passed through.
"""

from __future__ import annotations

from typing import Optional

import click

from .config import OVERVIEW_KINDS
from .kubectl import kubectl_lines, run_kubectl
from .output import Severity, emit


def _show(args: list[str]) -> int:
    """Run kubectl, echo what it printed, return its exit code."""
    result = run_kubectl(args)
    if result.stdout:
        click.echo(result.stdout.rstrip("\n"))
    if result.returncode != 0 and result.stderr:
        click.echo(result.stderr.rstrip("\n"), err=True)
    return result.returncode


def _section(title: str, args: list[str]) -> None:
    emit(Severity.HEADER, title)
    _show(args)
    click.echo()


def _choose(kind: str, choices: list[str]) -> str:
    """Numbered menu; click re-prompts until the answer is one of the numbers shown."""
    for number, choice in enumerate(choices, start=1):
        click.echo(f"{number}) {choice}")
    answer = click.prompt(f"Select {kind}", type=click.IntRange(1, len(choices)))
    return choices[answer - 1]


def current_context() -> str:
    lines = kubectl_lines(["config", "current-context"])
    return lines[0] if lines else ""


def context_names() -> list[str]:
    return kubectl_lines(["config", "get-contexts", "--output=name"])


def current_namespace() -> str:
    """Namespace of the current context; "default" when the context sets none."""
    lines = kubectl_lines(["config", "view", "--minify", "--output", "jsonpath={..namespace}"])
    return lines[0] if lines else "default"


def namespace_names() -> list[str]:
    return [line.split("/", 1)[-1] for line in kubectl_lines(["get", "namespaces", "--output=name"])]


def use_context(name: str) -> None:
    code = _show(["config", "use-context", name])
    if code != 0:
        click.get_current_context().exit(code)
    click.echo(f"Switched to context: {name}")


def set_namespace(name: str) -> None:
    code = _show(["config", "set-context", "--current", f"--namespace={name}"])
    if code != 0:
        click.get_current_context().exit(code)
    click.echo(f"Namespace set to: {name}")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
def kx() -> None:
    """
    Kubernetes shell shortcuts.

    \b
    Examples:
        kx ctx list
        kx ctx use staging
        kx ns menu
        kx info
        kx all -A
    """


@kx.group()
def ctx() -> None:
    """List and switch kubeconfig contexts."""


@ctx.command("list")
def ctx_list() -> None:
    """List all contexts."""
    click.get_current_context().exit(_show(["config", "get-contexts"]))


@ctx.command("current")
def ctx_current() -> None:
    """Print the current context."""
    click.echo(current_context())


@ctx.command("use")
@click.argument("name", required=False)
def ctx_use(name: Optional[str]) -> None:
    """Switch to context NAME."""
    if not name:
        click.echo("Usage: kx ctx use <context-name>")
        click.echo("Available contexts:")
        for context in context_names():
            click.echo(context)
        click.get_current_context().exit(1)
    use_context(name)


@ctx.command("menu")
def ctx_menu() -> None:
    """Pick a context from a numbered list."""
    contexts = context_names()
    click.echo(f"Current context: {current_context()}")
    if not contexts:
        emit(Severity.ERROR, "No contexts found in kubeconfig")
        click.get_current_context().exit(1)
    click.echo("Available contexts:")
    use_context(_choose("context", contexts))


@kx.group()
def ns() -> None:
    """List and switch the namespace of the current context."""


@ns.command("list")
def ns_list() -> None:
    """List all namespaces."""
    click.get_current_context().exit(_show(["get", "namespaces"]))


@ns.command("current")
def ns_current() -> None:
    """Print the namespace of the current context."""
    click.echo(current_namespace())


@ns.command("set")
@click.argument("name", required=False)
def ns_set(name: Optional[str]) -> None:
    """Set the namespace of the current context to NAME."""
    if not name:
        click.echo("Usage: kx ns set <namespace>")
        click.echo("Available namespaces:")
        for namespace in namespace_names():
            click.echo(namespace)
        click.get_current_context().exit(1)
    set_namespace(name)


@ns.command("menu")
def ns_menu() -> None:
    """Pick a namespace from a numbered list."""
    namespaces = namespace_names()
    click.echo(f"Current namespace: {current_namespace()}")
    if not namespaces:
        emit(Severity.ERROR, "No namespaces found")
        click.get_current_context().exit(1)
    click.echo("Available namespaces:")
    set_namespace(_choose("namespace", namespaces))


@kx.command()
def info() -> None:
    """Cluster info, current context/namespace, nodes and namespaces."""
    _section("CLUSTER INFO", ["cluster-info"])
    emit(Severity.HEADER, "CURRENT CONTEXT")
    click.echo(current_context())
    click.echo()
    emit(Severity.HEADER, "CURRENT NAMESPACE")
    click.echo(current_namespace())
    click.echo()
    _section("NODES", ["get", "nodes"])
    _section("NAMESPACES", ["get", "namespaces"])


@kx.command("all")
@click.option("-A", "--all-namespaces", "all_namespaces", is_flag=True, help="Across all namespaces")
def all_resources(all_namespaces: bool) -> None:
    """Pods, services, deployments, configmaps and secrets."""
    for kind in OVERVIEW_KINDS:
        args = ["get", kind]
        if all_namespaces:
            args.append("--all-namespaces")
        _section(kind.upper(), args)


if __name__ == "__main__":
    kx()
