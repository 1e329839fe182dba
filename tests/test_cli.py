"""Tests for the check-pv-usage CLI."""

import pytest
from click.testing import CliRunner
from conftest import make_owned, make_pod, make_pv

from kube_shortcuts import cli
from kube_shortcuts.cli import main
from kube_shortcuts.kubectl import PrerequisiteError


@pytest.fixture
def patched(monkeypatch, bound_cluster):
    """Run the CLI against the fake cluster with prerequisites satisfied."""
    monkeypatch.setattr(cli, "check_prerequisites", lambda: None)
    monkeypatch.setattr(cli, "KubectlCluster", lambda: bound_cluster)
    return bound_cluster


def test_cli_help():
    """CLI --help exits 0 and shows usage."""
    runner = CliRunner()
    result = runner.invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "check-pv-usage" in result.output
    assert "persistentvolume" in result.output.lower()


def test_cli_short_help():
    result = CliRunner().invoke(main, ["-h"])
    assert result.exit_code == 0
    assert "--interactive" in result.output


def test_no_arguments_prints_usage_and_fails(patched):
    result = CliRunner().invoke(main, [])
    assert result.exit_code == 1
    assert "[ERROR] No arguments provided" in result.output
    assert "Usage:" in result.output


def test_missing_prerequisite_is_fatal(monkeypatch):
    def fail():
        raise PrerequisiteError("Cannot connect to Kubernetes cluster")

    monkeypatch.setattr(cli, "check_prerequisites", fail)
    result = CliRunner().invoke(main, ["pv-data"])
    assert result.exit_code == 1
    assert "[ERROR] Cannot connect to Kubernetes cluster" in result.output


def test_trace_deployment(patched):
    patched.add("pods", make_pod("web-abc-1", claim="data", namespace="apps", owner=("ReplicaSet", "web-abc")))
    patched.add("replicasets", make_owned("web-abc", "apps", owner=("Deployment", "web")))
    patched.add("deployments", make_owned("web", "apps", replicas=3, ready=3))

    result = CliRunner().invoke(main, ["pv-data"])

    assert result.exit_code == 0
    out = result.output
    assert "=== PV Usage Check: pv-data ===" in out
    assert "[SUCCESS] PV is bound to PVC: data in namespace: apps" in out
    assert "[INFO] Analyzing Pod: web-abc-1" in out
    assert "  Immediate Owner: ReplicaSet/web-abc" in out
    assert "  Top-level Controller: Deployment/web" in out
    assert "    Replicas: 3/3" in out
    assert "    Container: app | Mount Path: /data | Volume: data" in out


def test_trace_daemonset_has_no_replicas_line(patched):
    patched.add("pods", make_pod("agent-x", claim="data", namespace="apps", owner=("DaemonSet", "agent")))
    result = CliRunner().invoke(main, ["pv-data"])
    assert result.exit_code == 0
    assert "Top-level Controller: DaemonSet/agent" in result.output
    assert "Replicas:" not in result.output


def test_trace_standalone_pod(patched):
    patched.add("pods", make_pod("debug", claim="data", namespace="apps"))
    result = CliRunner().invoke(main, ["pv-data"])
    assert result.exit_code == 0
    assert "[WARNING]   Pod 'debug' has no owner (standalone pod)" in result.output
    assert "Immediate Owner" not in result.output
    assert "Top-level Controller" not in result.output
    assert "Volume Mount Details" not in result.output
    assert "Container: app" not in result.output


def test_unmounted_claim_is_a_warning(patched):
    result = CliRunner().invoke(main, ["pv-data"])
    assert result.exit_code == 0
    assert "[WARNING] No pods found using PVC 'data'" in result.output
    assert "Analyzing Pod" not in result.output


def test_unbound_volume_is_a_warning(patched):
    patched.add("persistentvolumes", make_pv("pv-free"))
    result = CliRunner().invoke(main, ["pv-free"])
    assert result.exit_code == 0
    assert "[WARNING] PV 'pv-free' is not bound to any PVC (Status: Available)" in result.output
    assert "PVC Details" not in result.output


def test_dangling_reference_is_a_warning(patched):
    patched.add("persistentvolumes", make_pv("pv-old", claim="gone", namespace="apps"))
    result = CliRunner().invoke(main, ["pv-old"])
    assert result.exit_code == 0
    assert "[WARNING] PVC 'gone' not found in namespace 'apps'" in result.output
    assert "dangling PV reference" in result.output


def test_unknown_volume_is_reported(patched):
    result = CliRunner().invoke(main, ["nope"])
    assert result.exit_code == 0
    assert "[ERROR] PersistentVolume 'nope' not found" in result.output


def test_list_is_capped_at_19_rows(patched):
    for i in range(30):
        patched.add("persistentvolumes", make_pv(f"pv-{i:02d}"))
    result = CliRunner().invoke(main, ["--list"])
    assert result.exit_code == 0
    rows = [line for line in result.output.splitlines() if line.startswith("pv-")]
    assert len(rows) == 19
    assert "Showing first 19 PVs out of 31 total PVs" in result.output


def test_short_list_has_no_truncation_note(patched):
    result = CliRunner().invoke(main, ["-l"])
    assert result.exit_code == 0
    assert "pv-data" in result.output
    assert "Showing first" not in result.output


def test_interactive_traces_entered_volume(patched):
    result = CliRunner().invoke(main, ["-i"], input="pv-data\n")
    assert result.exit_code == 0
    assert "     1  pv-data" in result.output
    assert "=== PV Usage Check: pv-data ===" in result.output


def test_interactive_empty_input_fails(patched):
    result = CliRunner().invoke(main, ["--interactive"], input="\n")
    assert result.exit_code == 1
    assert "[ERROR] No PV name provided" in result.output
    assert "PV Usage Check" not in result.output
