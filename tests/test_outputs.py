from __future__ import annotations

from k3d_action.config import NetworkDescriptor
from k3d_action.outputs import emit_network_outputs, set_output


def test_outputs_append_to_github_output_file(monkeypatch, tmp_path):
    output_file = tmp_path / "github_output"
    output_file.write_text("existing=1\n")
    monkeypatch.setenv("GITHUB_OUTPUT", str(output_file))

    emit_network_outputs(NetworkDescriptor("k3d-action-bridge-network", "172.16.0.0/24"))

    assert output_file.read_text().splitlines() == [
        "existing=1",
        "network=k3d-action-bridge-network",
        "subnet-CIDR=172.16.0.0/24",
    ]


def test_outputs_fall_back_to_workflow_command(capsys):
    set_output("network", "nw01")

    assert capsys.readouterr().out == "::set-output name=network::nw01\n"
