"""Tiered fallback: try each attempt in order, settle on a fallback."""

from typing import Awaitable, Callable, Sequence, TypeVar

import structlog

from famtrack.domain.errors import ProviderError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class Tier:
    """One named attempt in a fallback chain."""

    def __init__(self, name: str, attempt: Callable[[], Awaitable[T]]):
        self.name = name
        self.attempt = attempt


async def run_tiers(tiers: Sequence[Tier], fallback: Callable[[], T]) -> T:
    """Return the first tier's result that succeeds, else ``fallback()``.

    A tier fails by raising ``ProviderError``; failures move on to the next
    tier and are never retried. Any other exception propagates.
    """
    for tier in tiers:
        try:
            result = await tier.attempt()
        except ProviderError as e:
            logger.warning("provider_tier_failed", provider=tier.name, error=str(e))
            continue
        logger.debug("provider_tier_succeeded", provider=tier.name)
        return result

    logger.warning("provider_tiers_exhausted", tiers=[tier.name for tier in tiers])
    return fallback()
