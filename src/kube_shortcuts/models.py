"""
Read-only views of the Kubernetes objects the tracer walks through.

Each view is parsed from `kubectl get -o json` output. Missing fields parse
to empty values ("" / [] / None) so callers treat absence as "unknown".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


def dig(obj: Optional[dict], path: str) -> Any:
    """Follow a dotted path ("spec.claimRef.name") through nested dicts; None if absent."""
    current: Any = obj
    for key in path.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def _text(obj: Optional[dict], path: str) -> str:
    value = dig(obj, path)
    if value is None:
        return ""
    if isinstance(value, list):
        return ",".join(str(v) for v in value)
    return str(value)


def _count(obj: Optional[dict], path: str) -> Optional[int]:
    value = dig(obj, path)
    return value if isinstance(value, int) else None


class OwnerKind(Enum):
    """Owner kinds the tracer knows how to follow; everything else is OTHER."""

    REPLICA_SET = "ReplicaSet"
    STATEFUL_SET = "StatefulSet"
    DAEMON_SET = "DaemonSet"
    JOB = "Job"
    OTHER = "Other"

    @classmethod
    def of(cls, kind: str) -> "OwnerKind":
        for member in cls:
            if member is not cls.OTHER and member.value == kind:
                return member
        return cls.OTHER


@dataclass(frozen=True)
class OwnerRef:
    kind: str
    name: str

    @property
    def variant(self) -> OwnerKind:
        return OwnerKind.of(self.kind)

    def __str__(self) -> str:
        return f"{self.kind}/{self.name}"


def first_owner(obj: Optional[dict]) -> Optional[OwnerRef]:
    """
    First entry of metadata.ownerReferences, or None.

    Objects with several owners are treated as single-owner: the first
    reference wins.
    """
    owners = dig(obj, "metadata.ownerReferences") or []
    if not owners or not isinstance(owners[0], dict):
        return None
    ref = owners[0]
    kind = ref.get("kind") or ""
    name = ref.get("name") or ""
    if not kind and not name:
        return None
    return OwnerRef(kind=kind, name=name)


@dataclass(frozen=True)
class ClaimRef:
    name: str
    namespace: str


@dataclass
class Volume:
    name: str
    phase: str = ""
    claim_ref: Optional[ClaimRef] = None
    capacity: str = ""
    storage_class: str = ""
    created: str = ""

    @classmethod
    def from_json(cls, obj: dict) -> "Volume":
        claim_name = _text(obj, "spec.claimRef.name")
        claim_ref = None
        # jsonpath on the shell side printed the literal "null" for cleared refs
        if claim_name and claim_name != "null":
            claim_ref = ClaimRef(claim_name, _text(obj, "spec.claimRef.namespace"))
        return cls(
            name=_text(obj, "metadata.name"),
            phase=_text(obj, "status.phase"),
            claim_ref=claim_ref,
            capacity=_text(obj, "spec.capacity.storage"),
            storage_class=_text(obj, "spec.storageClassName"),
            created=_text(obj, "metadata.creationTimestamp"),
        )


@dataclass
class Claim:
    name: str
    namespace: str
    phase: str = ""
    volume_name: str = ""
    capacity: str = ""
    access_modes: list[str] = field(default_factory=list)
    storage_class: str = ""
    created: str = ""

    @classmethod
    def from_json(cls, obj: dict) -> "Claim":
        return cls(
            name=_text(obj, "metadata.name"),
            namespace=_text(obj, "metadata.namespace"),
            phase=_text(obj, "status.phase"),
            volume_name=_text(obj, "spec.volumeName"),
            capacity=_text(obj, "status.capacity.storage"),
            access_modes=[str(m) for m in dig(obj, "status.accessModes") or []],
            storage_class=_text(obj, "spec.storageClassName"),
            created=_text(obj, "metadata.creationTimestamp"),
        )


@dataclass(frozen=True)
class VolumeMount:
    container: str
    volume_name: str
    mount_path: str


@dataclass(frozen=True)
class MountDetail:
    container: str
    mount_path: str
    volume_name: str


@dataclass
class Pod:
    name: str
    namespace: str
    phase: str = ""
    node: str = ""
    created: str = ""
    # volume name -> claim name ("" for volumes not backed by a PVC)
    volumes: dict[str, str] = field(default_factory=dict)
    mounts: list[VolumeMount] = field(default_factory=list)
    owner: Optional[OwnerRef] = None

    @classmethod
    def from_json(cls, obj: dict) -> "Pod":
        volumes = {}
        for vol in dig(obj, "spec.volumes") or []:
            if not isinstance(vol, dict) or not vol.get("name"):
                continue
            volumes[vol["name"]] = _text(vol, "persistentVolumeClaim.claimName")
        mounts = []
        for container in dig(obj, "spec.containers") or []:
            for mount in container.get("volumeMounts") or []:
                mounts.append(
                    VolumeMount(
                        container=container.get("name") or "",
                        volume_name=mount.get("name") or "",
                        mount_path=mount.get("mountPath") or "",
                    )
                )
        return cls(
            name=_text(obj, "metadata.name"),
            namespace=_text(obj, "metadata.namespace"),
            phase=_text(obj, "status.phase"),
            node=_text(obj, "spec.nodeName"),
            created=_text(obj, "metadata.creationTimestamp"),
            volumes=volumes,
            mounts=mounts,
            owner=first_owner(obj),
        )

    def uses_claim(self, claim_name: str) -> bool:
        return claim_name in self.volumes.values()

    def mounts_of_claim(self, claim_name: str) -> list[MountDetail]:
        """Container mounts whose volume is backed by claim_name, in container order."""
        backing = {vol for vol, claim in self.volumes.items() if claim == claim_name}
        return [
            MountDetail(m.container, m.mount_path, m.volume_name)
            for m in self.mounts
            if m.volume_name in backing
        ]


@dataclass(frozen=True)
class ReplicaStatus:
    desired: Optional[int]
    ready: Optional[int]

    @classmethod
    def from_json(cls, obj: Optional[dict]) -> "ReplicaStatus":
        return cls(desired=_count(obj, "spec.replicas"), ready=_count(obj, "status.readyReplicas"))

    def ratio(self) -> str:
        """Format as ready/desired; unknown counts render blank."""
        ready = "" if self.ready is None else str(self.ready)
        desired = "" if self.desired is None else str(self.desired)
        return f"{ready}/{desired}"
