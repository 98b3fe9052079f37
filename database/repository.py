from sqlalchemy.orm import Session

from database.repositories import EmployeeRepository, TaskRepository, ScoreLogRepository


class HrRepository:
    """Groups the per-table repositories behind one session."""

    def __init__(self, db: Session):
        self.db = db
        self.employees = EmployeeRepository(db)
        self.tasks = TaskRepository(db)
        self.score_logs = ScoreLogRepository(db)

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
