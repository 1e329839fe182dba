"""
Trace a PersistentVolume to the workloads that use it.

trace_volume() walks PV -> PVC -> pods mounting the claim -> owner chain ->
top-level controller and returns a TraceReport. Each hop is one read-only
lookup through a ClusterQuery. A lookup that comes back empty means "not
found"; the walk stops at the first blocking condition (unbound volume,
dangling claim reference, unmounted claim) and records it as the outcome.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .config import (
    CRONJOBS,
    DAEMONSETS,
    DEPLOYMENTS,
    JOBS,
    PODS,
    PV,
    PVC,
    REPLICASETS,
    STATEFULSETS,
)
from .kubectl import ClusterQuery
from .models import (
    Claim,
    MountDetail,
    OwnerKind,
    OwnerRef,
    Pod,
    ReplicaStatus,
    Volume,
    first_owner,
)

logger = logging.getLogger(__name__)


class Outcome(Enum):
    NOT_FOUND = "not-found"
    UNBOUND = "unbound"
    DANGLING = "dangling"
    UNMOUNTED = "unmounted"
    TRACED = "traced"


@dataclass
class PodTrace:
    pod: Pod
    # None for a standalone pod; then top_level is None as well
    owner: Optional[OwnerRef] = None
    top_level: Optional[OwnerRef] = None
    replicas: Optional[ReplicaStatus] = None
    mounts: list[MountDetail] = field(default_factory=list)

    @property
    def standalone(self) -> bool:
        return self.owner is None


@dataclass
class TraceReport:
    volume_name: str
    outcome: Outcome
    volume: Optional[Volume] = None
    claim: Optional[Claim] = None
    pods: list[PodTrace] = field(default_factory=list)


def _controller_details(
    cluster: ClusterQuery, controller: OwnerRef, resource: Optional[str], namespace: str
) -> Optional[ReplicaStatus]:
    """
    Replica counts for the controller, looked up as `resource`.

    Only Deployments and StatefulSets have replica counts to report.
    DaemonSets get no details. Jobs and CronJobs have an arm here but no
    lookup behind it yet, so they report nothing either. resource is None
    for owner kinds the tracer does not follow.
    """
    if resource in (DEPLOYMENTS, STATEFULSETS):
        return ReplicaStatus.from_json(cluster.get_resource(resource, controller.name, namespace))
    if resource in (JOBS, CRONJOBS):
        # TODO: report schedule / last run for CronJobs and completions for Jobs.
        logger.debug("no detail lookup for %s", controller)
        return None
    if resource == DAEMONSETS or resource is None:
        return None
    raise AssertionError(f"unhandled controller resource {resource}")


def _trace_owner(
    cluster: ClusterQuery, owner: OwnerRef, namespace: str
) -> tuple[OwnerRef, Optional[str]]:
    """
    Follow owner one more hop where the kind has a known parent.

    Returns the top-level controller and the resource its details are looked
    up as (None when the owner kind is reported verbatim).
    """
    variant = owner.variant
    if variant is OwnerKind.REPLICA_SET:
        parent = first_owner(cluster.get_resource(REPLICASETS, owner.name, namespace))
        if parent is not None and parent.name and parent.kind == "Deployment":
            return parent, DEPLOYMENTS
        return owner, None
    if variant is OwnerKind.JOB:
        parent = first_owner(cluster.get_resource(JOBS, owner.name, namespace))
        if parent is not None and parent.name and parent.kind == "CronJob":
            return parent, CRONJOBS
        return owner, JOBS
    if variant is OwnerKind.STATEFUL_SET:
        return owner, STATEFULSETS
    if variant is OwnerKind.DAEMON_SET:
        return owner, DAEMONSETS
    if variant is OwnerKind.OTHER:
        return owner, None
    raise AssertionError(f"unhandled owner kind {variant}")


def trace_pod(cluster: ClusterQuery, pod: Pod, claim_name: str) -> PodTrace:
    trace = PodTrace(pod=pod, owner=pod.owner, mounts=pod.mounts_of_claim(claim_name))
    if pod.owner is None:
        return trace
    trace.top_level, resource = _trace_owner(cluster, pod.owner, pod.namespace)
    trace.replicas = _controller_details(cluster, trace.top_level, resource, pod.namespace)
    return trace


def trace_volume(volume_name: str, cluster: ClusterQuery) -> TraceReport:
    """
    Resolve volume_name down to the workloads mounting it.

    Args:
        volume_name: PersistentVolume name.
        cluster: Read-only query interface (KubectlCluster in production).

    Returns:
        TraceReport whose outcome says where the walk stopped. Pod traces are
        only present for Outcome.TRACED.
    """
    pv_obj = cluster.get_resource(PV, volume_name)
    if pv_obj is None:
        return TraceReport(volume_name, Outcome.NOT_FOUND)
    volume = Volume.from_json(pv_obj)
    report = TraceReport(volume_name, Outcome.UNBOUND, volume=volume)
    if volume.claim_ref is None:
        return report

    claim_ref = volume.claim_ref
    pvc_obj = cluster.get_resource(PVC, claim_ref.name, claim_ref.namespace)
    if pvc_obj is None:
        report.outcome = Outcome.DANGLING
        return report
    report.claim = Claim.from_json(pvc_obj)

    pods = [Pod.from_json(obj) for obj in cluster.list_resources(PODS, claim_ref.namespace)]
    using = [pod for pod in pods if pod.uses_claim(claim_ref.name)]
    logger.debug("%d of %d pods in %s use %s", len(using), len(pods), claim_ref.namespace, claim_ref.name)
    if not using:
        report.outcome = Outcome.UNMOUNTED
        return report

    report.outcome = Outcome.TRACED
    for pod in using:
        if not pod.namespace:
            pod.namespace = claim_ref.namespace
        report.pods.append(trace_pod(cluster, pod, claim_ref.name))
    return report
