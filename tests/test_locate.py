"""Tests for statusboard.lib.locate module."""

from statusboard.lib.locate import candidate_paths, find_all_status_files, find_status_file


def _touch(root, *parts):
    path = root.joinpath(*parts)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("workflows: {}\n")
    return path


class TestCandidatePaths:
    def test_order(self, tmp_path):
        rel = [p.relative_to(tmp_path).as_posix() for p in candidate_paths(tmp_path)]
        assert rel == [
            "_bmad-output/planning-artifacts/bmm-workflow-status.yaml",
            "_bmad-output/bmm-workflow-status.yaml",
            "docs/bmm-workflow-status.yaml",
            "bmm-workflow-status.yaml",
        ]

    def test_extra_candidates_appended(self, tmp_path):
        paths = candidate_paths(tmp_path, ["planning/status.yaml", "docs/bmm-workflow-status.yaml"])
        assert len(paths) == 5
        assert paths[-1] == tmp_path / "planning" / "status.yaml"


class TestFindStatusFile:
    def test_none_when_nothing_exists(self, tmp_path):
        assert find_status_file(tmp_path) is None
        assert find_all_status_files(tmp_path) == []

    def test_first_existing_wins(self, tmp_path):
        root_file = _touch(tmp_path, "bmm-workflow-status.yaml")
        docs_file = _touch(tmp_path, "docs", "bmm-workflow-status.yaml")

        assert find_status_file(tmp_path) == docs_file
        assert find_all_status_files(tmp_path) == [docs_file, root_file]

    def test_planning_artifacts_preferred(self, tmp_path):
        _touch(tmp_path, "_bmad-output", "bmm-workflow-status.yaml")
        planning = _touch(tmp_path, "_bmad-output", "planning-artifacts", "bmm-workflow-status.yaml")
        assert find_status_file(tmp_path) == planning

    def test_directories_are_not_matches(self, tmp_path):
        (tmp_path / "bmm-workflow-status.yaml").mkdir()
        assert find_status_file(tmp_path) is None

    def test_extra_candidate_found(self, tmp_path):
        extra = _touch(tmp_path, "planning", "status.yaml")
        assert find_status_file(tmp_path, ["planning/status.yaml"]) == extra
