"""Shared fixtures for statusboard tests."""

import pytest

CURRENT_STATUS = """\
# BMad workflow status
last_updated: 2025-06-01
status: active
status_note: Planning underway
project_name: Acme Portal
project_type: web
selected_track: bmad-method
field_type: greenfield
workflow_path: _bmad/bmm/workflows/greenfield.yaml

workflows:
  # Discovery
  brainstorm-project:
    status: complete
    output_file: docs/brainstorm.md
  product-brief:
    status: not_started
    notes: Waiting on stakeholder input
  prd:
    status: not_started
  create-architecture:
    status: in-progress # started Monday
    note: Draft v1
  sprint-planning:
    status: not_started
  custom-audit:
    status: not_started
"""

LEGACY_STATUS = """\
# Sprint tracker (legacy layout)
last_updated: "2024-11-02"
status: in-progress
project: Acme Portal
project_type: web

workflow_status:
  - id: "story-2"
    phase: 3
    status: "ready-for-dev"
    agent: dev
    command: dev-story
  - id: story-1
    phase: 3
    status: "backlog"
    agent: dev
    command: dev-story
    note: Needs API contract
  - id: "story-10"
    phase: 3
    status: "backlog"
    agent: dev
    command: dev-story
  - id: workflow-init
    phase: prerequisite
    status: "done"
    agent: analyst
    command: workflow-init
  - id: prd
    phase: 1
    status: required
    agent: pm
    command: prd
"""


@pytest.fixture
def current_status_file(tmp_path):
    """A Current-schema status file."""
    path = tmp_path / "bmm-workflow-status.yaml"
    path.write_text(CURRENT_STATUS)
    return path


@pytest.fixture
def legacy_status_file(tmp_path):
    """A Legacy-schema status file."""
    path = tmp_path / "bmm-workflow-status.yaml"
    path.write_text(LEGACY_STATUS)
    return path
