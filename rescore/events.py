"""Task-completion events that trigger a rescore."""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from core.scorer.models import COMPLETED


@dataclass(frozen=True)
class TaskCompletedEvent:
    org_id: str
    task_id: str
    employee_id: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TaskCompletedEvent":
        return cls(
            org_id=str(data['org_id']),
            task_id=str(data['task_id']),
            employee_id=str(data['employee_id']),
        )


def should_dispatch(previous_status: Optional[str], new_status: str, employee_id: Optional[Any]) -> bool:
    """
    True only for a transition INTO COMPLETED on an assigned task.

    A save that leaves an already-completed task completed is not a
    transition and must not rescore again.
    """
    previous = getattr(previous_status, 'value', previous_status)
    new = getattr(new_status, 'value', new_status)
    return new == COMPLETED and previous != COMPLETED and employee_id is not None
