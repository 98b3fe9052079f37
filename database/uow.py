import contextlib
import logging
from typing import Callable, Iterator, Optional

from sqlalchemy.orm import Session

from database import database
from database.repository import HrRepository

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def hr_uow(session_factory: Optional[Callable[[], Session]] = None) -> Iterator[HrRepository]:
    """Per-job transaction scope for the rescore path.

    Yields an HrRepository on a fresh Session from ``session_factory``
    (the module-level SessionLocal by default). Commits on success, rolls
    back on exception, always closes. Services may commit earlier
    themselves; the final commit is then a no-op.

    Usage:
        with hr_uow() as repo:
            ScoreService(repo, cache).recompute_and_persist(org_id, task_id, employee_id)
    """
    session = (session_factory or database.SessionLocal)()
    try:
        yield HrRepository(session)
        session.commit()
    except Exception as e:
        logger.warning(f"Rolling back unit of work after {type(e).__name__}")
        session.rollback()
        raise
    finally:
        session.close()
