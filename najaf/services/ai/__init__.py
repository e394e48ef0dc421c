"""
Text Generation Service Factory

Returns Mock or OpenAI text generation service based on ENV_MODE.

Usage:
    from najaf.services.ai import get_text_generation_service

    service = get_text_generation_service()
    description = await service.describe_dish("برجر")

Author: Khalil_Bannouri
Version: 1.0.0
"""

import logging
from functools import lru_cache

from najaf.core.config import get_settings
from najaf.services.ai.base import (
    BaseTextGenerationService,
    ANALYSIS_FALLBACK,
    ANALYSIS_MISSING_KEY,
    DESCRIPTION_FALLBACK,
    DESCRIPTION_MISSING_KEY,
)
from najaf.services.ai.mock import MockTextGenerationService
from najaf.services.ai.openai import OpenAITextGenerationService

logger = logging.getLogger(__name__)


@lru_cache()
def get_text_generation_service() -> BaseTextGenerationService:
    """Get the configured text generation service."""
    settings = get_settings()

    if settings.is_development:
        logger.info("Text Generation: Using MockTextGenerationService (development mode)")
        return MockTextGenerationService()
    else:
        logger.info(f"Text Generation: Using OpenAITextGenerationService ({settings.env_mode.value} mode)")
        return OpenAITextGenerationService()


def reset_text_generation_service() -> None:
    """Clear the cached service instance."""
    get_text_generation_service.cache_clear()


__all__ = [
    "get_text_generation_service",
    "reset_text_generation_service",
    "BaseTextGenerationService",
    "MockTextGenerationService",
    "OpenAITextGenerationService",
    "ANALYSIS_FALLBACK",
    "ANALYSIS_MISSING_KEY",
    "DESCRIPTION_FALLBACK",
    "DESCRIPTION_MISSING_KEY",
]
