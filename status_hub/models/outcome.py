"""
Outcome module - Result values returned by registry mutations
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any

from .enums import OutcomeStatus, IgnoreReason, TaskStatus, TaskSource
from .task import Task


@dataclass
class UpdateOutcome:
    """
    Tri-state result of a mutating registry call.

    ``task`` is a snapshot taken inside the critical section (after the
    mutation when applied, unchanged state when ignored). ``previous_status``
    is the status before the call; ``owner`` the source that owned the task
    when the call was evaluated.
    """
    status: OutcomeStatus
    reason: Optional[IgnoreReason] = None
    task: Optional[Task] = None
    previous_status: Optional[TaskStatus] = None
    owner: Optional[TaskSource] = None
    created: bool = False

    @classmethod
    def ok(cls, task: Task, previous_status: Optional[TaskStatus] = None,
           owner: Optional[TaskSource] = None, created: bool = False) -> "UpdateOutcome":
        return cls(OutcomeStatus.OK, task=task, previous_status=previous_status,
                   owner=owner, created=created)

    @classmethod
    def ignored(cls, reason: IgnoreReason, task: Task) -> "UpdateOutcome":
        return cls(OutcomeStatus.IGNORED, reason=reason, task=task,
                   previous_status=task.status, owner=task.source)

    @classmethod
    def not_found(cls) -> "UpdateOutcome":
        return cls(OutcomeStatus.NOT_FOUND)

    def to_response(self) -> Dict[str, Any]:
        """REST acknowledgement body: ``{status, reason?}``."""
        body: Dict[str, Any] = {"status": self.status.value}
        if self.reason is not None:
            body["reason"] = self.reason.value
        return body
