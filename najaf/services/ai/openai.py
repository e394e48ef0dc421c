"""
OpenAI Text Generation Service Implementation

Production implementation using a LangChain ChatOpenAI model.
Used when ENV_MODE=production or ENV_MODE=staging.

Requirements:
    - OPENAI_API_KEY should be set in environment; without it every call
      returns the fixed "unavailable" fallback

Calls are single attempts: no retries, and a failure of any kind is logged
and replaced by the fixed fallback string.

Author: Khalil_Bannouri
Version: 1.0.0
"""

import logging
from typing import Any, Optional

from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import Runnable
from langchain_openai import ChatOpenAI

from najaf.core.config import get_settings
from najaf.services.ai.base import (
    ANALYSIS_FALLBACK,
    ANALYSIS_MISSING_KEY,
    ANALYZE_SALES_PROMPT,
    BaseTextGenerationService,
    DESCRIBE_DISH_PROMPT,
    DESCRIPTION_FALLBACK,
    DESCRIPTION_MISSING_KEY,
)

logger = logging.getLogger(__name__)

describe_prompt = ChatPromptTemplate.from_messages([("human", DESCRIBE_DISH_PROMPT)])
analysis_prompt = ChatPromptTemplate.from_messages([("human", ANALYZE_SALES_PROMPT)])


class OpenAITextGenerationService(BaseTextGenerationService):
    """
    Chat-model backed text generation.

    Attributes:
        llm: The chat model (or any runnable taking a prompt value), or None
            when no API key is configured

    Example:
        >>> service = OpenAITextGenerationService()
        >>> await service.describe_dish("Burger")
        'برجر لحم طازج مشوي...'
    """

    def __init__(self, llm: Optional[Runnable] = None):
        """
        Initialize the chat model from settings unless one is supplied.

        Args:
            llm: Pre-built model, used by tests to stub the API
        """
        settings = get_settings()

        if llm is not None:
            self.llm = llm
        elif settings.openai_api_key:
            self.llm = ChatOpenAI(
                model=settings.ai_model,
                api_key=settings.openai_api_key,
                temperature=settings.ai_temperature,
                max_retries=0,
            )
        else:
            self.llm = None
            logger.error("API Key not found: OPENAI_API_KEY is not configured")

        logger.info(
            f"OpenAITextGenerationService initialized "
            f"(model={settings.ai_model}, configured={self.llm is not None})"
        )

    @property
    def provider_name(self) -> str:
        return "openai"

    async def _generate(self, prompt: ChatPromptTemplate, variables: dict[str, Any]) -> str:
        chain = prompt | self.llm | StrOutputParser()
        text = await chain.ainvoke(variables)
        return text.strip()

    async def describe_dish(self, dish_name: str) -> str:
        if self.llm is None:
            return DESCRIPTION_MISSING_KEY

        try:
            text = await self._generate(describe_prompt, {"dish_name": dish_name})
        except Exception as e:
            logger.error(f"Error generating description: {e}")
            return DESCRIPTION_FALLBACK
        return text or DESCRIPTION_FALLBACK

    async def analyze_sales(self, summary: str) -> str:
        if self.llm is None:
            return ANALYSIS_MISSING_KEY

        try:
            text = await self._generate(analysis_prompt, {"summary": summary})
        except Exception as e:
            logger.error(f"Error analyzing sales: {e}")
            return ANALYSIS_FALLBACK
        return text or ANALYSIS_FALLBACK

    async def health_check(self) -> bool:
        return self.llm is not None
