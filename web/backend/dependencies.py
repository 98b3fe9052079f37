#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

from functools import lru_cache
from typing import Generator

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from core.app_context import AppContext
from core.dashboard.service import DashboardService
from core.errors import NotFoundError
from core.recommender.service import RecommendationService
from core.scorer.service import ScoreService
from core.utils import parse_id
from database import database
from database.repository import HrRepository
from .config import get_config


class DatabaseManager:
    """
    Manages database connections and sessions.

    Binds the process-wide session factory, so in-process rescore jobs
    (hr_uow) write through the same engine as request sessions.
    """

    def __init__(self):
        config = get_config()
        self.engine = database.configure_engine(
            config.database.url,
            pool_timeout_seconds=config.database.pool_timeout_seconds,
            statement_timeout_ms=config.database.statement_timeout_ms
        )
        self.SessionLocal = database.SessionLocal

    def get_session(self) -> Generator[Session, None, None]:
        """
        Get a database session.

        Yields:
            Session: SQLAlchemy database session.
        """
        session = self.SessionLocal()
        try:
            yield session
        finally:
            session.close()


@lru_cache()
def get_db_manager() -> DatabaseManager:
    return DatabaseManager()


@lru_cache()
def get_app_context() -> AppContext:
    """Cache backend and rescore dispatcher, built once per process."""
    return AppContext.build(get_config())


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session.

    Usage:
        @app.get("/endpoint")
        def my_endpoint(db: Session = Depends(get_db)):
            ...

    Yields:
        Session: Database session that will be automatically closed.
    """
    yield from get_db_manager().get_session()


def get_repo(db: Session = Depends(get_db)) -> HrRepository:
    return HrRepository(db)


def get_org_id(x_org_id: str = Header(..., alias="X-Org-Id")) -> str:
    """
    Tenant of the request.

    Authentication sits in front of this service and sets the header; an
    unparseable value is treated like an unknown tenant.
    """
    return str(parse_id(x_org_id, NotFoundError))


def get_score_service(
    repo: HrRepository = Depends(get_repo),
    context: AppContext = Depends(get_app_context)
) -> ScoreService:
    return context.score_service(repo)


def get_recommendation_service(
    repo: HrRepository = Depends(get_repo),
    context: AppContext = Depends(get_app_context)
) -> RecommendationService:
    return context.recommendation_service(repo)


def get_dashboard_service(
    repo: HrRepository = Depends(get_repo),
    context: AppContext = Depends(get_app_context)
) -> DashboardService:
    return context.dashboard_service(repo)
