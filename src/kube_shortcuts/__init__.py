"""
kube_shortcuts: kubectl helpers for everyday cluster work.

Ships check-pv-usage, which traces a PersistentVolume through its claim and
the pods mounting it up to the top-level workload controllers, and kx, a set
of context, namespace and overview shortcuts.
"""

__version__ = "0.1.0"
