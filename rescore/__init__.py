"""
Rescore Module

Turns task-completion transitions into out-of-band score recomputation.

Usage:
    from rescore import RescoreDispatcher, TaskCompletedEvent, should_dispatch

    if should_dispatch(previous_status, task.status, task.assigned_to):
        dispatcher.on_task_completed(
            TaskCompletedEvent(org_id=org_id, task_id=task_id, employee_id=employee_id)
        )
"""

from rescore.events import TaskCompletedEvent, should_dispatch
from rescore.tasks import process_rescore_job
from rescore.dispatcher import RescoreDispatcher

__all__ = [
    'TaskCompletedEvent',
    'should_dispatch',
    'process_rescore_job',
    'RescoreDispatcher',
]
