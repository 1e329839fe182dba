"""Shared fixtures: an in-memory cluster and builders for kubectl-style JSON."""

from typing import Optional

import pytest


class FakeCluster:
    """ClusterQuery over a dict of objects; records every lookup."""

    def __init__(self):
        self.objects = {}
        self.calls = []

    def add(self, kind: str, obj: dict) -> dict:
        meta = obj.get("metadata", {})
        self.objects[(kind, meta.get("namespace"), meta["name"])] = obj
        return obj

    def get_resource(self, kind: str, name: str, namespace: Optional[str] = None):
        self.calls.append(("get", kind, name, namespace))
        return self.objects.get((kind, namespace, name))

    def list_resources(self, kind: str, namespace: Optional[str] = None):
        self.calls.append(("list", kind, namespace))
        return [
            obj
            for (k, ns, _), obj in self.objects.items()
            if k == kind and (namespace is None or ns == namespace)
        ]

    def kinds_called(self) -> list:
        return [call[1] for call in self.calls]


def make_pv(name, claim=None, namespace="default", phase=None, storage_class="standard"):
    pv = {
        "metadata": {"name": name, "creationTimestamp": "2024-05-01T10:00:00Z"},
        "spec": {"capacity": {"storage": "10Gi"}, "storageClassName": storage_class},
        "status": {"phase": phase or ("Bound" if claim else "Available")},
    }
    if claim:
        pv["spec"]["claimRef"] = {"name": claim, "namespace": namespace}
    return pv


def make_pvc(name, namespace="default", volume=""):
    return {
        "metadata": {"name": name, "namespace": namespace, "creationTimestamp": "2024-05-01T10:00:00Z"},
        "spec": {"volumeName": volume, "storageClassName": "standard"},
        "status": {"phase": "Bound", "capacity": {"storage": "10Gi"}, "accessModes": ["ReadWriteOnce"]},
    }


def make_pod(name, claim, namespace="default", owner=None, mount_path="/data", volume="data"):
    pod = {
        "metadata": {"name": name, "namespace": namespace, "creationTimestamp": "2024-05-02T08:30:00Z"},
        "spec": {
            "nodeName": "node-1",
            "volumes": [
                {"name": volume, "persistentVolumeClaim": {"claimName": claim}},
                {"name": "config", "configMap": {"name": "app-config"}},
            ],
            "containers": [
                {
                    "name": "app",
                    "volumeMounts": [
                        {"name": volume, "mountPath": mount_path},
                        {"name": "config", "mountPath": "/etc/app"},
                    ],
                },
                {"name": "sidecar", "volumeMounts": [{"name": "config", "mountPath": "/etc/sidecar"}]},
            ],
        },
        "status": {"phase": "Running"},
    }
    if owner:
        pod["metadata"]["ownerReferences"] = [{"kind": owner[0], "name": owner[1]}]
    return pod


def make_owned(name, namespace="default", owner=None, replicas=None, ready=None):
    obj = {"metadata": {"name": name, "namespace": namespace}, "spec": {}, "status": {}}
    if owner:
        obj["metadata"]["ownerReferences"] = [{"kind": owner[0], "name": owner[1]}]
    if replicas is not None:
        obj["spec"]["replicas"] = replicas
    if ready is not None:
        obj["status"]["readyReplicas"] = ready
    return obj


@pytest.fixture
def cluster():
    return FakeCluster()


@pytest.fixture
def bound_cluster(cluster):
    """pv-data bound to claim data in namespace apps."""
    cluster.add("persistentvolumes", make_pv("pv-data", claim="data", namespace="apps"))
    cluster.add("persistentvolumeclaims", make_pvc("data", namespace="apps", volume="pv-data"))
    return cluster
