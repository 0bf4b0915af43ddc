"""
Tests: command-line entry point.

Run with:
    pytest safeguard_mapper/tests/test_cli.py -v
"""

import json

import pytest

from safeguard_mapper.main import EXIT_INVALID_INPUT, main
from safeguard_mapper.tests.sample_responses import ASSET_MAX_TEXT, THREAT_INTEL_TEXT


class TestCommands:
    def test_list_ids(self, capsys):
        assert main(["list", "--ids"]) == 0
        body = json.loads(capsys.readouterr().out)
        assert body["total"] == 153
        assert body["safeguards"][0] == "1.1"

    def test_list_by_function(self, capsys):
        assert main(["list", "--function", "Identify"]) == 0
        body = json.loads(capsys.readouterr().out)
        assert body["total"] == len(body["safeguards"]) > 0
        assert all("Identify" in s["security_function"] for s in body["safeguards"])

    def test_list_rejects_unknown_function(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["list", "--function", "Observe"])
        assert exc.value.code == EXIT_INVALID_INPUT
        assert "invalid choice" in capsys.readouterr().err

    def test_show(self, capsys):
        assert main(["show", "7.1", "--examples"]) == 0
        body = json.loads(capsys.readouterr().out)
        assert body["id"] == "7.1"

    def test_validate(self, capsys):
        code = main([
            "validate", "--vendor", "ThreatIntel Pro", "--safeguard", "1.1",
            "--capability", "full", "--text", THREAT_INTEL_TEXT,
        ])
        assert code == 0
        body = json.loads(capsys.readouterr().out)
        assert body["effective_capability"] == "facilitates"

    def test_analyze_from_file(self, tmp_path, capsys):
        path = tmp_path / "response.txt"
        path.write_text(ASSET_MAX_TEXT, encoding="utf-8")
        assert main(["analyze", "--vendor", "AssetMax Pro", "--safeguard", "1.1", "--file", str(path)]) == 0
        body = json.loads(capsys.readouterr().out)
        assert body["detected_tool_type"] == "inventory"


class TestErrors:
    def test_unknown_safeguard(self, capsys):
        assert main(["show", "42.42"]) == EXIT_INVALID_INPUT
        err = capsys.readouterr().err
        assert "Safeguard 42.42 not found" in err
        assert "Guidance:" in err

    def test_invalid_capability(self, capsys):
        code = main([
            "validate", "--vendor", "V", "--safeguard", "1.1",
            "--capability", "complete", "--text", ASSET_MAX_TEXT,
        ])
        assert code == EXIT_INVALID_INPUT
        assert "Invalid claimed capability" in capsys.readouterr().err
