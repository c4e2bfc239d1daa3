"""Choice between a direct stream copy and a render-then-finalize cut.

The plan is chosen once per cut:

- DirectCopyPlan: quality is untouched and no usable subtitle needs burning
  in; ffmpeg trims the source with stream copy.
- RenderThenFinalizePlan: everything else. A usable subtitle under the
  untouched tier escalates to the high tier because stream copy cannot
  burn subtitles in.
"""

from dataclasses import dataclass

from mpvcut.domain.enums import QualityTier
from mpvcut.domain.models import TrackSelection

ESCALATION_TIER = QualityTier.HIGH


@dataclass(frozen=True)
class DirectCopyPlan:
    """Trim the source straight into the output with ffmpeg."""


@dataclass(frozen=True)
class RenderThenFinalizePlan:
    """Render with mpv at ``tier`` then remux with ffmpeg."""

    tier: QualityTier
    escalated: bool = False

    @property
    def crf(self) -> int:
        # Only CRF tiers reach this plan
        assert self.tier.crf is not None
        return self.tier.crf


CutPlan = DirectCopyPlan | RenderThenFinalizePlan


def plan_cut(quality: QualityTier, tracks: TrackSelection) -> CutPlan:
    """Select the pipeline for a cut."""
    needs_subtitle = tracks.burn_subtitle is not None

    if quality is QualityTier.UNTOUCHED:
        if not needs_subtitle:
            return DirectCopyPlan()
        return RenderThenFinalizePlan(tier=ESCALATION_TIER, escalated=True)

    return RenderThenFinalizePlan(tier=quality)
