"""Pure planners: compute segment windows and crossfade schedules."""

from mkvutils.planners.merge import advance_total, equal_power_gains, plan_merge
from mkvutils.planners.split import plan_split

__all__ = ["advance_total", "equal_power_gains", "plan_merge", "plan_split"]
