# Application Scheduler Package
from .coarse import step_simple
from .engine import schedule
from .mastery import (
    DEFAULT_POLICY,
    MasteryPolicy,
    classify,
    consecutive_incorrect,
    is_due,
    is_reactivated,
    record_outcome,
)
from .pass_fail import interval_for_level, step_pass_fail
from .sm2 import clamp_ease_factor, round_half_up, step

__all__ = [
    "DEFAULT_POLICY",
    "MasteryPolicy",
    "classify",
    "clamp_ease_factor",
    "consecutive_incorrect",
    "interval_for_level",
    "is_due",
    "is_reactivated",
    "record_outcome",
    "round_half_up",
    "schedule",
    "step",
    "step_pass_fail",
    "step_simple",
]
