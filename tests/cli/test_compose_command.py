"""Tests for the compose and discover CLI commands."""

import json

import yaml
from typer.testing import CliRunner

from schema_composer.cli.main import app as cli_app


# --- Helpers ---


def _write_sources(tmp_path):
    people = tmp_path / "people.json"
    people.write_text(json.dumps([{"fullName": "Ada Lovelace", "email": "ada@example.com"}]))

    staff = tmp_path / "staff"
    staff.mkdir()
    (staff / "001.json").write_text(
        json.dumps({"name": "Ada Lovelace", "email": "ada@example.com", "badge": {"code": "A1"}})
    )
    return people, staff


# --- compose ---


class TestComposeCommand:
    def test_compose_writes_unified_schema(self, tmp_path):
        people, staff = _write_sources(tmp_path)
        output = tmp_path / "out" / "unified.json"

        result = CliRunner().invoke(
            cli_app, ["compose", str(people), str(staff), "-o", str(output), "-n", "team"]
        )

        assert result.exit_code == 0, result.output
        assert "Unified schema written to" in result.output
        data = json.loads(output.read_text())
        assert data["name"] == "team"
        assert data["sources"] == ["people", "staff"]
        assert [c["name"] for c in data["classes"]] == ["people", "Badge"]

    def test_compose_with_provenance(self, tmp_path):
        people, staff = _write_sources(tmp_path)
        provenance_dir = tmp_path / "provenance"

        result = CliRunner().invoke(
            cli_app,
            [
                "compose",
                str(people),
                str(staff),
                "-o",
                str(tmp_path / "unified.yaml"),
                "--provenance-dir",
                str(provenance_dir),
                "--format",
                "yaml",
            ],
        )

        assert result.exit_code == 0, result.output
        staff_provenance = yaml.safe_load((provenance_dir / "staff.provenance.yaml").read_text())
        assert {"source": "staff.name", "target": "people.fullName"} in staff_provenance["attributes"]
        assert (provenance_dir / "people.provenance.yaml").exists()

    def test_sources_with_same_name_get_separate_provenance(self, tmp_path):
        for directory, document in (("a", {"fullName": "Ada"}), ("b", {"nickname": "Ada"})):
            (tmp_path / directory).mkdir()
            (tmp_path / directory / "people.json").write_text(json.dumps(document))
        output = tmp_path / "unified.json"
        provenance_dir = tmp_path / "provenance"

        result = CliRunner().invoke(
            cli_app,
            [
                "compose",
                str(tmp_path / "a" / "people.json"),
                str(tmp_path / "b" / "people.json"),
                "-o",
                str(output),
                "--provenance-dir",
                str(provenance_dir),
            ],
        )

        assert result.exit_code == 0, result.output
        assert json.loads(output.read_text())["sources"] == ["people", "people_2"]
        first = json.loads((provenance_dir / "people.provenance.json").read_text())
        second = json.loads((provenance_dir / "people_2.provenance.json").read_text())
        assert first["attributes"] == [{"source": "people.fullName", "target": "people.fullName"}]
        assert second["source"] == "people_2"
        assert second["attributes"] == [
            {"source": "people_2.nickname", "target": "people_2.nickname"}
        ]

    def test_threshold_option(self, tmp_path):
        people, staff = _write_sources(tmp_path)
        output = tmp_path / "unified.json"

        result = CliRunner().invoke(
            cli_app,
            ["compose", str(people), str(staff), "-o", str(output), "--threshold", "1.0"],
        )

        assert result.exit_code == 0, result.output
        names = [c["name"] for c in json.loads(output.read_text())["classes"]]
        assert names == ["people", "staff", "Badge"]

    def test_missing_source(self, tmp_path):
        result = CliRunner().invoke(
            cli_app, ["compose", str(tmp_path / "nope.json"), "-o", str(tmp_path / "out.json")]
        )

        assert result.exit_code == 1
        assert "does not exist" in result.output
        assert not (tmp_path / "out.json").exists()

    def test_unsupported_format(self, tmp_path):
        people, _ = _write_sources(tmp_path)
        result = CliRunner().invoke(
            cli_app, ["compose", str(people), "-o", str(tmp_path / "out"), "--format", "xml"]
        )
        assert result.exit_code == 1
        assert "unsupported format" in result.output

    def test_unwritable_output(self, tmp_path):
        people, _ = _write_sources(tmp_path)
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        result = CliRunner().invoke(cli_app, ["compose", str(people), "-o", str(blocker / "out.json")])

        assert result.exit_code == 1
        assert "Could not write" in result.output


# --- discover ---


class TestDiscoverCommand:
    def test_discover_prints_schema(self, tmp_path):
        people, _ = _write_sources(tmp_path)

        result = CliRunner().invoke(cli_app, ["discover", str(people)])

        assert result.exit_code == 0, result.output
        assert '"name": "people"' in result.output
        assert '"fullName"' in result.output

    def test_discover_to_file(self, tmp_path):
        _, staff = _write_sources(tmp_path)
        output = tmp_path / "staff.yaml"

        result = CliRunner().invoke(
            cli_app, ["discover", str(staff), "-o", str(output), "--format", "yaml"]
        )

        assert result.exit_code == 0, result.output
        data = yaml.safe_load(output.read_text())
        assert [c["name"] for c in data["classes"]] == ["staff", "Badge"]

    def test_discover_invalid_json(self, tmp_path):
        broken = tmp_path / "broken.json"
        broken.write_text("{")

        result = CliRunner().invoke(cli_app, ["discover", str(broken)])

        assert result.exit_code == 1
        assert "Invalid JSON" in result.output
