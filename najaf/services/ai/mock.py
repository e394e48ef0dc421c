"""
Mock Text Generation Service

Canned Arabic text for development mode; no API calls are made.
"""

import logging

from najaf.services.ai.base import BaseTextGenerationService

logger = logging.getLogger(__name__)


class MockTextGenerationService(BaseTextGenerationService):
    """Deterministic stand-in for the chat model."""

    def __init__(self):
        logger.info("MockTextGenerationService initialized")

    @property
    def provider_name(self) -> str:
        return "mock"

    async def describe_dish(self, dish_name: str) -> str:
        return f"{dish_name} محضّر طازجاً بمكونات مختارة ونكهة لا تُقاوم."

    async def analyze_sales(self, summary: str) -> str:
        logger.debug(f"Mock sales analysis for: {summary}")
        return (
            "1. ركّز العروض على الأصناف الأكثر مبيعاً في أوقات الذروة.\n"
            "2. أضف مشروباً أو حلى كخيار إضافي لرفع متوسط قيمة الطلب."
        )

    async def health_check(self) -> bool:
        return True
