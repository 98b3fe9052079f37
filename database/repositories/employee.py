import logging
from typing import Any, List, Optional

from sqlalchemy import select

from database.models import Employee
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class EmployeeRepository(BaseRepository):
    def get(self, org_id: Any, employee_id: Any, active_only: bool = False) -> Optional[Employee]:
        stmt = select(Employee).where(
            Employee.id == employee_id,
            Employee.org_id == org_id
        )
        if active_only:
            stmt = stmt.where(Employee.is_active.is_(True))
        return self.db.execute(stmt).scalar_one_or_none()

    def list_active(self, org_id: Any, department: Optional[str] = None) -> List[Employee]:
        stmt = select(Employee).where(
            Employee.org_id == org_id,
            Employee.is_active.is_(True)
        )
        if department:
            stmt = stmt.where(Employee.department == department)
        stmt = stmt.order_by(Employee.name.asc())
        return self.db.execute(stmt).scalars().all()

    def list_for_org(self, org_id: Any) -> List[Employee]:
        stmt = select(Employee).where(Employee.org_id == org_id).order_by(Employee.name.asc())
        return self.db.execute(stmt).scalars().all()

    def ids_by_job_title(self, org_id: Any, job_title: str) -> List[Any]:
        stmt = select(Employee.id).where(
            Employee.org_id == org_id,
            Employee.job_title == job_title,
            Employee.is_active.is_(True)
        )
        return [row[0] for row in self.db.execute(stmt).all()]
