"""
Constants and environment settings for kube-shortcuts.

Defines the PersistentVolume listing columns, the Kubernetes kinds the
tracer walks through, and the KUBE_SHORTCUTS_* environment settings.
"""

from __future__ import annotations

import os
from typing import Optional

# Listing shows at most this many volumes (the shell version piped through `head -20`).
LIST_LIMIT = 19

# (header, JSON path) pairs for `check-pv-usage --list`.
PV_LIST_COLUMNS = [
    ("NAME", "metadata.name"),
    ("STATUS", "status.phase"),
    ("CLAIM", "spec.claimRef.name"),
    ("NAMESPACE", "spec.claimRef.namespace"),
    ("STORAGECLASS", "spec.storageClassName"),
    ("CAPACITY", "spec.capacity.storage"),
]

# Columns for the numbered listing in interactive mode.
PV_INTERACTIVE_COLUMNS = [
    ("NAME", "metadata.name"),
    ("STATUS", "status.phase"),
    ("CLAIM", "spec.claimRef.name"),
    ("STORAGECLASS", "spec.storageClassName"),
]

# Kubectl resource names used by the tracer (must match `kubectl get <kind>`).
PV = "persistentvolumes"
PVC = "persistentvolumeclaims"
PODS = "pods"
REPLICASETS = "replicasets"
DEPLOYMENTS = "deployments"
STATEFULSETS = "statefulsets"
DAEMONSETS = "daemonsets"
JOBS = "jobs"
CRONJOBS = "cronjobs"

# Cluster-scoped kinds (no -n when fetching).
CLUSTER_SCOPED_KINDS = frozenset({PV, "namespaces", "nodes"})

# Sections printed by `kx all`.
OVERVIEW_KINDS = ["pods", "services", "deployments", "configmaps", "secrets"]

ENV_PREFIX = "KUBE_SHORTCUTS_"


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"{ENV_PREFIX}{key}", default)


def kubectl_binary() -> str:
    """Kubectl executable name or path (KUBE_SHORTCUTS_KUBECTL, default "kubectl")."""
    return _env("KUBECTL", "kubectl") or "kubectl"


def kubectl_timeout() -> Optional[float]:
    """
    Per-call kubectl timeout in seconds (KUBE_SHORTCUTS_TIMEOUT).

    Unset, empty or "0" means calls block until kubectl returns.
    Raises ValueError for a non-numeric value.
    """
    raw = _env("TIMEOUT").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"Invalid {ENV_PREFIX}TIMEOUT: {raw!r}") from None
    return value if value > 0 else None
