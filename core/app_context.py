from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from core.access.control import AccessControlGate
from core.cache.result_cache import ResultCacheService, init_result_cache
from core.config_loader import AppConfig, LlmConfig
from core.discovery.candidate import CandidateJobDiscovery
from core.discovery.recruiter import RecruiterCandidateDiscovery
from core.llm.openai_service import OpenAIService
from core.matcher.eligibility import EligibilityGate
from core.matcher.service import MatchEngine
from core.scorer.service import ScoringService
from database.repositories import (
    ApplicationRepository, CandidateRepository, JobRepository, SubscriptionRepository
)


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    Stateless services (engine, cache) are built once from config. Discovery
    services need repositories, so they are built per session via
    candidate_discovery() / recruiter_discovery() inside db_session_scope().
    """
    config: AppConfig
    engine: MatchEngine
    ai_service: Optional[OpenAIService] = None
    result_cache: Optional[ResultCacheService] = None

    @classmethod
    def build(cls, config: AppConfig) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration

        Returns:
            Fully wired AppContext instance (no DB session attached)
        """
        matching = config.matching

        # AI Service (only when the remote strategy is on)
        ai_service = None
        if matching.ai_enabled:
            ai_service = cls._build_ai_service(config.llm)

        scoring_service = ScoringService.build(matching.ai_enabled, ai_service)
        engine = MatchEngine(
            scoring_service=scoring_service,
            gate=EligibilityGate(),
            minimum_threshold=matching.minimum_threshold,
        )

        # Result cache (lazy - only if enabled)
        result_cache = None
        if config.cache.enabled:
            result_cache = init_result_cache(
                redis_url=config.cache.redis_url,
                password=config.cache.password,
                ttl_seconds=config.cache.ttl_seconds,
            )

        return cls(
            config=config,
            engine=engine,
            ai_service=ai_service,
            result_cache=result_cache,
        )

    @staticmethod
    def _build_ai_service(llm_config: LlmConfig) -> Optional[OpenAIService]:
        """Build OpenAI service from LLM configuration.

        Returns None without an API key or base URL; the remote strategy then
        reports itself unavailable and scoring falls back to the rules.
        """
        if not llm_config.api_key and not llm_config.base_url:
            return None

        model_config = {
            'model': llm_config.model,
            'temperature': llm_config.temperature,
            'max_tokens': llm_config.max_tokens,
        }

        return OpenAIService(
            api_key=llm_config.api_key,
            base_url=llm_config.base_url,
            model_config=model_config,
            timeout_seconds=llm_config.timeout_seconds,
            max_retries=llm_config.max_retries,
        )

    def candidate_discovery(self, session: Session) -> CandidateJobDiscovery:
        return CandidateJobDiscovery(
            engine=self.engine,
            candidates=CandidateRepository(session),
            jobs=JobRepository(session),
            cache=self.result_cache,
            max_workers=self.config.matching.max_concurrent_remote_calls,
        )

    def recruiter_discovery(self, session: Session) -> RecruiterCandidateDiscovery:
        return RecruiterCandidateDiscovery(
            engine=self.engine,
            candidates=CandidateRepository(session),
            jobs=JobRepository(session),
            applications=ApplicationRepository(session),
            access=AccessControlGate(SubscriptionRepository(session)),
            cache=self.result_cache,
            max_workers=self.config.matching.max_concurrent_remote_calls,
        )
