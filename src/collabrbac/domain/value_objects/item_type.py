"""Kinds of shared item a permission can target."""

from enum import StrEnum


class ItemType(StrEnum):
    """Goals are not individually assigned; milestones, steps and tasks are."""

    GOAL = "goal"
    MILESTONE = "milestone"
    STEP = "step"
    TASK = "task"
