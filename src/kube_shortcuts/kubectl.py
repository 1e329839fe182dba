"""
Kubectl invocation and Kubernetes resource JSON helpers.

All cluster access goes through subprocess kubectl calls. This module
provides a small wrapper, helpers to fetch resources as JSON, the
prerequisite checks run before any command, and KubectlCluster, the
read-only query adapter the tracer runs against.
"""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
from typing import Optional, Protocol

from .config import CLUSTER_SCOPED_KINDS, kubectl_binary, kubectl_timeout

logger = logging.getLogger(__name__)


class PrerequisiteError(Exception):
    """kubectl is missing or the cluster cannot be reached."""


class ClusterQuery(Protocol):
    """Read-only lookups the tracer needs from a cluster."""

    def get_resource(
        self, kind: str, name: str, namespace: Optional[str] = None
    ) -> Optional[dict]:
        ...

    def list_resources(self, kind: str, namespace: Optional[str] = None) -> list[dict]:
        ...


def run_kubectl(args: list[str]) -> subprocess.CompletedProcess:
    """
    Run kubectl with the given args.

    Args:
        args: List of arguments (e.g. ["get", "pv", "-o", "json"]).

    Returns:
        CompletedProcess with returncode, stdout, stderr. A call that runs past
        the configured timeout comes back with returncode -1 and empty stdout.
    """
    cmd = [kubectl_binary()] + args
    logger.debug("running: %s", " ".join(cmd))
    try:
        return subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=kubectl_timeout(),
        )
    except subprocess.TimeoutExpired as exc:
        logger.debug("timed out after %ss: %s", exc.timeout, " ".join(cmd))
        return subprocess.CompletedProcess(cmd, -1, stdout="", stderr="timed out")


def check_prerequisites() -> None:
    """
    Make sure kubectl is installed and the current context reaches a cluster.

    Raises:
        PrerequisiteError: kubectl is not on PATH or `kubectl cluster-info` fails.
    """
    if shutil.which(kubectl_binary()) is None:
        raise PrerequisiteError("kubectl is not installed or not in PATH")
    result = run_kubectl(["cluster-info"])
    if result.returncode != 0:
        logger.debug("cluster-info failed: %s", (result.stderr or "").strip())
        raise PrerequisiteError("Cannot connect to Kubernetes cluster")


def kubectl_get_json(
    kind: str,
    name: Optional[str] = None,
    namespace: Optional[str] = None,
) -> Optional[dict]:
    """
    Get one or more resources as JSON.

    Args:
        kind: Resource kind (plural), e.g. "pods", "persistentvolumes".
        name: Optional specific resource name.
        namespace: Optional namespace; ignored for cluster-scoped kinds.

    Returns:
        Parsed JSON dict (List-style with "items" or single object), or None on
        failure / missing resource / invalid JSON.
    """
    args = ["get", kind]
    if name:
        args.append(name)
    if namespace and kind not in CLUSTER_SCOPED_KINDS:
        args.extend(["-n", namespace])
    args.extend(["-o", "json"])
    result = run_kubectl(args)
    if result.returncode != 0 or not result.stdout:
        logger.debug("get %s %s failed: %s", kind, name or "", (result.stderr or "").strip())
        return None
    try:
        return json.loads(result.stdout)
    except json.JSONDecodeError:
        logger.debug("get %s %s returned invalid JSON", kind, name or "")
        return None


def kubectl_lines(args: list[str]) -> list[str]:
    """Run kubectl and return its non-empty stdout lines ([] on failure)."""
    result = run_kubectl(args)
    if result.returncode != 0 or not result.stdout:
        return []
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]


class KubectlCluster:
    """ClusterQuery backed by `kubectl get ... -o json`."""

    def get_resource(
        self, kind: str, name: str, namespace: Optional[str] = None
    ) -> Optional[dict]:
        if not name:
            return None
        return kubectl_get_json(kind, name=name, namespace=namespace)

    def list_resources(self, kind: str, namespace: Optional[str] = None) -> list[dict]:
        obj = kubectl_get_json(kind, namespace=namespace)
        if not obj:
            return []
        return obj.get("items") or []
