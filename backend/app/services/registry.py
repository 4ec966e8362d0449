"""Explicitly constructed service graph shared by request handlers."""

from dataclasses import dataclass
from typing import Optional

from app.config import Settings, settings as default_settings
from app.services.cache import TTLCache
from app.services.catalog import CatalogService
from app.services.counters import CounterReconciler
from app.services.csrf import CSRFTokenService
from app.services.description_service import DescriptionGenerator
from app.services.rate_limit import RateLimiter
from app.services.repository import PropertyRepository


@dataclass
class ServiceRegistry:
    cache: TTLCache
    rate_limiter: RateLimiter
    csrf: CSRFTokenService
    repository: PropertyRepository
    counters: CounterReconciler
    catalog: CatalogService
    descriptions: DescriptionGenerator


def build_services(
    config: Optional[Settings] = None,
    *,
    cache: Optional[TTLCache] = None,
    rate_limiter: Optional[RateLimiter] = None,
    csrf: Optional[CSRFTokenService] = None,
    repository: Optional[PropertyRepository] = None,
    descriptions: Optional[DescriptionGenerator] = None,
) -> ServiceRegistry:
    """Build a fresh registry; keyword overrides let tests inject fakes."""
    config = config or default_settings

    cache = cache or TTLCache(default_ttl=config.cache_default_ttl_seconds)
    rate_limiter = rate_limiter or RateLimiter(
        config.rate_limits, window_seconds=config.rate_limit_window_seconds
    )
    csrf = csrf or CSRFTokenService(ttl_seconds=config.csrf_token_ttl_seconds)
    repository = repository or PropertyRepository(timeout=config.store_timeout_seconds)
    descriptions = descriptions or DescriptionGenerator(
        api_key=config.openai_api_key,
        model=config.openai_model,
        timeout=config.ai_timeout_seconds,
    )

    return ServiceRegistry(
        cache=cache,
        rate_limiter=rate_limiter,
        csrf=csrf,
        repository=repository,
        counters=CounterReconciler(repository),
        catalog=CatalogService(
            repository,
            cache,
            product_ttl=config.product_cache_ttl_seconds,
            collection_ttl=config.collection_cache_ttl_seconds,
            archive_after_days=config.archive_after_days,
        ),
        descriptions=descriptions,
    )
