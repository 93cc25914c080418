"""
Phase and agent inference for Current-schema workflow items.

The Current schema only stores status per workflow id. Phase and agent are
methodology knowledge, looked up here by id.
"""

from types import MappingProxyType

PHASE_NAMES = MappingProxyType({
    0: "Discovery",
    1: "Planning",
    2: "Solutioning",
    3: "Implementation",
})

DEFAULT_PHASE = 1
DEFAULT_AGENT = "pm"

WORKFLOW_PHASE_MAP = MappingProxyType({
    # Phase 0 - Discovery
    "brainstorm": 0,
    "brainstorm-project": 0,
    "research": 0,
    "product-brief": 0,
    # Phase 1 - Planning
    "prd": 1,
    "validate-prd": 1,
    "ux-design": 1,
    "create-ux-design": 1,
    # Phase 2 - Solutioning
    "architecture": 2,
    "create-architecture": 2,
    "epics-stories": 2,
    "create-epics-and-stories": 2,
    "test-design": 2,
    "implementation-readiness": 2,
    # Phase 3 - Implementation
    "sprint-planning": 3,
})

WORKFLOW_AGENT_MAP = MappingProxyType({
    "brainstorm": "analyst",
    "brainstorm-project": "analyst",
    "research": "analyst",
    "product-brief": "analyst",
    "prd": "pm",
    "validate-prd": "pm",
    "ux-design": "ux-designer",
    "create-ux-design": "ux-designer",
    "architecture": "architect",
    "create-architecture": "architect",
    "epics-stories": "pm",
    "create-epics-and-stories": "pm",
    "test-design": "tea",
    "implementation-readiness": "architect",
    "sprint-planning": "sm",
})


def infer_phase(workflow_id: str) -> int:
    """Phase for a workflow id, Planning when unknown."""
    return WORKFLOW_PHASE_MAP.get(workflow_id, DEFAULT_PHASE)


def infer_agent(workflow_id: str) -> str:
    return WORKFLOW_AGENT_MAP.get(workflow_id, DEFAULT_AGENT)


def infer_command(workflow_id: str) -> str:
    # Commands are named after the workflow id
    return workflow_id


def phase_label(phase) -> str:
    """Human-readable label for a phase value."""
    if isinstance(phase, int) and not isinstance(phase, bool) and phase in PHASE_NAMES:
        return f"Phase {phase}: {PHASE_NAMES[phase]}"
    if phase is None or phase == "":
        return "Unphased"
    if isinstance(phase, str):
        return phase.capitalize()
    return f"Phase {phase}"
