from dataclasses import dataclass
from typing import Optional

from core.cache import build_cache
from core.cache.views import CacheAside
from core.config_loader import AppConfig
from core.dashboard.service import DashboardService
from core.recommender.service import RecommendationService
from core.scorer.service import ScoreService
from database.repository import HrRepository
from rescore.dispatcher import RescoreDispatcher


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    The cache backend and the dispatcher are selected once here. Services
    are cheap and bound per request to an HrRepository, so DB access stays
    scoped to hr_uow() / get_db().
    """
    config: AppConfig
    cache: CacheAside
    dispatcher: Optional[RescoreDispatcher] = None

    @classmethod
    def build(cls, config: AppConfig, with_dispatcher: bool = True) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration
            with_dispatcher: False for processes that only read (e.g. scripts)

        Returns:
            Fully wired AppContext instance (no DB session attached)
        """
        cache = CacheAside(build_cache(config.cache), config.cache)

        dispatcher = None
        if with_dispatcher:
            dispatcher = RescoreDispatcher(config, cache)

        return cls(config=config, cache=cache, dispatcher=dispatcher)

    def score_service(self, repo: HrRepository) -> ScoreService:
        return ScoreService(repo, self.cache, self.config)

    def recommendation_service(self, repo: HrRepository) -> RecommendationService:
        return RecommendationService(repo, self.cache, self.config)

    def dashboard_service(self, repo: HrRepository) -> DashboardService:
        return DashboardService(repo, self.cache, self.config)

    def close(self) -> None:
        if self.dispatcher is not None:
            self.dispatcher.shutdown(wait=False)
