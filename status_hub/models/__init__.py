"""
Models module - Task data structures, enums and outcome values
"""

from .enums import TaskStatus, TaskSource, OutcomeStatus, IgnoreReason
from .task import Task, TaskView
from .outcome import UpdateOutcome

__all__ = [
    'TaskStatus',
    'TaskSource',
    'OutcomeStatus',
    'IgnoreReason',
    'Task',
    'TaskView',
    'UpdateOutcome',
]
