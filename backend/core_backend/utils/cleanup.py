"""
Explicit cleanup plans for multi-table deletions.

A plan is an ordered list of named steps. ``run`` executes every step inside a
single ``transaction.atomic`` block, so either all of them commit or none do,
and the list itself documents what the deletion touches.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, List

from django.db import transaction

logger = logging.getLogger(__name__)


@dataclass
class CleanupStep:
    name: str
    action: Callable[[], object]


@dataclass
class CleanupPlan:
    """Ordered cleanup actions executed under one transaction."""

    label: str
    steps: List[CleanupStep] = field(default_factory=list)

    def add(self, name, action):
        self.steps.append(CleanupStep(name=name, action=action))
        return self

    def delete_queryset(self, name, queryset):
        """Add a step that deletes every row of ``queryset``."""
        return self.add(name, lambda: queryset.delete())

    def run(self):
        """
        Run all steps atomically.

        Returns:
            dict mapping step name to the number of rows the step deleted
            (or the step's own return value when it is not a delete).
        """
        results = {}
        with transaction.atomic():
            for step in self.steps:
                outcome = step.action()
                # QuerySet.delete() returns (total, per_model)
                if isinstance(outcome, tuple) and len(outcome) == 2:
                    outcome = outcome[0]
                results[step.name] = outcome
        logger.info(f"Cleanup '{self.label}' completed: {results}")
        return results
