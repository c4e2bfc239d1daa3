"""Cut state machine and the actions built on it."""

from mpvcut.cutter.context import CutContext
from mpvcut.cutter.orchestrator import CutOrchestrator
from mpvcut.cutter.planning import (
    ESCALATION_TIER,
    CutPlan,
    DirectCopyPlan,
    RenderThenFinalizePlan,
    plan_cut,
)
from mpvcut.cutter.screenshots import take_screenshot_pair

__all__ = [
    "CutContext",
    "CutOrchestrator",
    "CutPlan",
    "DirectCopyPlan",
    "ESCALATION_TIER",
    "RenderThenFinalizePlan",
    "plan_cut",
    "take_screenshot_pair",
]
