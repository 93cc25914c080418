"""Tests for the sb command line."""

import asyncio

import pytest

from statusboard.cli import build_parser, main
from statusboard.commands.watch import _run
from statusboard.lib import config as config_lib


def run(workspace, *argv):
    return main(["--workspace", str(workspace), *argv])


def _second_status_file(tmp_path):
    docs = tmp_path / "docs"
    docs.mkdir()
    path = docs / "bmm-workflow-status.yaml"
    path.write_text("workflows:\n  prd:\n    status: done\n")
    return path


class TestParser:
    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_set_arguments(self):
        args = build_parser().parse_args(["set", "prd", "done"])
        assert (args.item, args.status) == ("prd", "done")


class TestShow:
    def test_current_schema(self, tmp_path, current_status_file, capsys):
        assert run(tmp_path, "show") == 0
        out = capsys.readouterr().out

        assert "Project:     Acme Portal" in out
        assert "Track:       bmad-method" in out
        assert "Status:      active - Planning underway" in out
        assert "Schema:      current" in out
        assert "Progress:    1/6 items" in out
        assert "Phase 0: Discovery" in out
        assert "docs/brainstorm.md" in out
        assert "(Draft v1)" in out

    def test_phases_in_order(self, tmp_path, current_status_file, capsys):
        run(tmp_path, "show")
        out = capsys.readouterr().out
        positions = [out.index(f"Phase {n}:") for n in range(4)]
        assert positions == sorted(positions)

    def test_legacy_schema(self, tmp_path, legacy_status_file, capsys):
        assert run(tmp_path, "show") == 0
        out = capsys.readouterr().out

        assert "Schema:      legacy" in out
        assert "Progress:    1/5 items" in out
        assert out.index("Prerequisite") < out.index("Phase 1: Planning")

    def test_empty_document(self, tmp_path, capsys):
        (tmp_path / "bmm-workflow-status.yaml").write_text("project: Empty\n")
        assert run(tmp_path, "show") == 0
        assert "No workflow items defined" in capsys.readouterr().out

    def test_malformed_file(self, tmp_path, capsys):
        (tmp_path / "bmm-workflow-status.yaml").write_text("workflows: [oops\n")
        assert run(tmp_path, "show") == 2
        assert "ERROR:" in capsys.readouterr().out

    def test_explicit_file_relative_to_workspace(self, tmp_path, current_status_file, capsys):
        other = _second_status_file(tmp_path)
        assert run(tmp_path, "--file", "docs/bmm-workflow-status.yaml", "show") == 0
        out = capsys.readouterr().out
        assert str(other) in out
        assert "Progress:    1/1 items" in out

    def test_missing_explicit_file(self, tmp_path, capsys):
        assert run(tmp_path, "--file", "nope.yaml", "show") == 2
        assert "not found" in capsys.readouterr().out

    def test_no_status_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            run(tmp_path, "show")
        assert exc.value.code == 2
        assert "No status file found" in capsys.readouterr().out

    def test_multiple_status_files(self, tmp_path, current_status_file, capsys):
        _second_status_file(tmp_path)
        with pytest.raises(SystemExit) as exc:
            run(tmp_path, "show")
        assert exc.value.code == 2
        assert "Multiple status files found" in capsys.readouterr().out

    def test_selection_resolves_multiple(self, tmp_path, current_status_file, capsys):
        other = _second_status_file(tmp_path)
        config_lib.set_selected_file(tmp_path, other)

        assert run(tmp_path, "show") == 0
        assert "Progress:    1/1 items" in capsys.readouterr().out


class TestPhase:
    def test_numbered_phase(self, tmp_path, current_status_file, capsys):
        assert run(tmp_path, "phase", "0") == 0
        out = capsys.readouterr().out
        assert out.startswith("Phase 0: Discovery")
        assert "brainstorm-project" in out
        assert "(Waiting on stakeholder input)" in out
        assert "prd" not in out

    def test_prerequisite(self, tmp_path, legacy_status_file, capsys):
        assert run(tmp_path, "phase", "prerequisite") == 0
        assert "workflow-init" in capsys.readouterr().out

    def test_empty_phase(self, tmp_path, legacy_status_file, capsys):
        assert run(tmp_path, "phase", "2") == 0
        assert "(no items)" in capsys.readouterr().out

    def test_invalid_phase(self, tmp_path, current_status_file, capsys):
        assert run(tmp_path, "phase", "later") == 2
        assert "Invalid phase" in capsys.readouterr().out


class TestSet:
    def test_updates_file(self, tmp_path, current_status_file, capsys):
        assert run(tmp_path, "set", "prd", "in-progress") == 0
        assert "Set prd to in-progress" in capsys.readouterr().out
        assert "  prd:\n    status: in-progress\n" in current_status_file.read_text()

    def test_unknown_item(self, tmp_path, current_status_file, capsys):
        before = current_status_file.read_text()
        assert run(tmp_path, "set", "deploy", "done") == 1
        assert "Failed to update status for deploy" in capsys.readouterr().out
        assert current_status_file.read_text() == before

    def test_legacy_item(self, tmp_path, legacy_status_file, capsys):
        assert run(tmp_path, "set", "story-1", "review") == 0
        assert "Set story-1 to review" in capsys.readouterr().out

    def test_missing_explicit_file(self, tmp_path, capsys):
        assert run(tmp_path, "--file", "nope.yaml", "set", "prd", "done") == 2


class TestLocate:
    def test_nothing_found(self, tmp_path, capsys):
        assert run(tmp_path, "locate") == 1
        assert "No status file found" in capsys.readouterr().out

    def test_first_match(self, tmp_path, current_status_file, capsys):
        _second_status_file(tmp_path)
        assert run(tmp_path, "locate") == 0
        assert capsys.readouterr().out.strip() == "docs/bmm-workflow-status.yaml"

    def test_all_matches_mark_selection(self, tmp_path, current_status_file, capsys):
        _second_status_file(tmp_path)
        config_lib.set_selected_file(tmp_path, current_status_file)

        assert run(tmp_path, "locate", "--all") == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert lines == [
            "docs/bmm-workflow-status.yaml",
            "bmm-workflow-status.yaml  (current)",
        ]


class TestUse:
    def test_select_and_show(self, tmp_path, current_status_file, capsys):
        assert run(tmp_path, "use", "bmm-workflow-status.yaml") == 0
        assert "Now using status file: bmm-workflow-status.yaml" in capsys.readouterr().out

        assert run(tmp_path, "use") == 0
        assert "Current status file: bmm-workflow-status.yaml" in capsys.readouterr().out

    def test_nothing_selected(self, tmp_path, capsys):
        assert run(tmp_path, "use") == 0
        assert "No status file selected" in capsys.readouterr().out

    def test_missing_path(self, tmp_path, capsys):
        assert run(tmp_path, "use", "docs/missing.yaml") == 1
        assert "not found" in capsys.readouterr().out

    def test_clear(self, tmp_path, current_status_file, capsys):
        run(tmp_path, "use", "bmm-workflow-status.yaml")
        assert run(tmp_path, "use", "--clear") == 0
        assert "Cleared status file selection." in capsys.readouterr().out
        assert config_lib.get_selected_file(tmp_path) is None


class TestWatch:
    def test_missing_file(self, tmp_path, capsys):
        assert run(tmp_path, "--file", "nope.yaml", "watch") == 2
        assert "not found" in capsys.readouterr().out

    def test_prints_initial_progress(self, tmp_path, current_status_file, capsys):
        async def scenario():
            stop = asyncio.Event()
            stop.set()
            return await _run(tmp_path, current_status_file, stop)

        assert asyncio.run(scenario()) == 0
        assert "Acme Portal: 1/6 items done" in capsys.readouterr().out
        # Watching never records a selection
        assert config_lib.get_selected_file(tmp_path) is None
