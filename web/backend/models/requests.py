#!/usr/bin/env python3
"""
Request models for API endpoints.
"""

from pydantic import BaseModel, Field
from typing import Optional


class TaskCompletedRequest(BaseModel):
    """
    Task status transition reported by the task board.

    A rescore is dispatched only when the transition moves the task INTO
    COMPLETED and the task has an assignee.
    """
    task_id: str
    employee_id: Optional[str] = Field(None, description="Assignee at completion time")
    previous_status: Optional[str] = Field(None, description="Status before the transition")
    status: str = Field("COMPLETED", description="Status after the transition")
