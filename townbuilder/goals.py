"""Goal evaluation.

``is_complete`` is a pure function of a goal and a GoalSnapshot; it keeps no
state. The orchestrator re-runs it every tick for outstanding goals and records
completion itself as a one-way flag.

A goal with a time limit evaluates False forever once the limit has passed,
even if the other requirements are met later. There is no separate "failed"
state.
"""

from typing import List

from .catalog import GOAL_CATALOG
from .schemas import Goal, GoalSnapshot, GoalTier


def is_complete(goal: Goal, snapshot: GoalSnapshot) -> bool:
    """True only if every present requirement holds at once."""
    requirements = goal.requirements

    if requirements.population is not None and snapshot.population < requirements.population:
        return False

    for kind, minimum in requirements.resources.items():
        if snapshot.resources.get(kind, 0.0) < minimum:
            return False

    for kind, minimum in requirements.buildings.items():
        if snapshot.building_counts.get(kind, 0) < minimum:
            return False

    if requirements.time_limit is not None:
        if snapshot.elapsed_ms / 1000 > requirements.time_limit:
            return False

    return True


def is_expired(goal: Goal, snapshot: GoalSnapshot) -> bool:
    """True when an incomplete goal's time limit has already passed."""
    limit = goal.requirements.time_limit
    return not goal.completed and limit is not None and snapshot.elapsed_ms / 1000 > limit


def goals_for_tier(tier: GoalTier) -> List[Goal]:
    """Fresh, uncompleted copies of a tier's goals."""
    return [goal.model_copy(deep=True) for goal in GOAL_CATALOG[tier]]


def all_goals() -> List[Goal]:
    goals: List[Goal] = []
    for tier in GoalTier:
        goals.extend(goals_for_tier(tier))
    return goals
