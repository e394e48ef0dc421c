"""
Text Generation Service Abstract Base Class

Defines the interface for the two optional AI enrichments:
    - describe_dish: short appetizing menu description for a dish name
    - analyze_sales: two brief tips for the manager from a sales summary

Both are best-effort. Implementations never raise; a missing credential or
a failed call yields one of the fixed fallback strings below so the menu
form and the dashboard keep working.

Author: Khalil_Bannouri
Version: 1.0.0
"""

from abc import ABC, abstractmethod


# Fixed fallbacks shown in place of generated text
DESCRIPTION_MISSING_KEY = "وصف تلقائي غير متاح (Missing API Key)"
DESCRIPTION_FALLBACK = "وصف شهي ولذيذ."
ANALYSIS_MISSING_KEY = "التحليل غير متاح."
ANALYSIS_FALLBACK = "لا توجد بيانات كافية للتحليل."

DESCRIBE_DISH_PROMPT = (
    'Write a short, appetizing description (max 20 words) in Arabic for a '
    'restaurant menu item named: "{dish_name}". Make it sound delicious.'
)
ANALYZE_SALES_PROMPT = (
    "Analyze this sales data summary in Arabic and give 2 brief strategic "
    "tips for the restaurant manager: {summary}"
)


class BaseTextGenerationService(ABC):
    """
    Abstract base class for text generation services.

    Example:
        >>> service = get_text_generation_service()
        >>> await service.describe_dish("برجر")
        'برجر مشوي على الفحم مع صوص خاص...'
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the text provider.

        Returns:
            str: Provider name (e.g., "mock", "openai")
        """
        pass

    @abstractmethod
    async def describe_dish(self, dish_name: str) -> str:
        """
        Generate a menu description (max 20 words, Arabic).

        Args:
            dish_name: Name typed into the add-product form

        Returns:
            str: Description, or a fixed fallback string
        """
        pass

    @abstractmethod
    async def analyze_sales(self, summary: str) -> str:
        """
        Generate strategic tips from a one-line sales summary.

        Args:
            summary: e.g. "Total Orders: 12, Revenue: 1340, Top Categories: برجر"

        Returns:
            str: Advice text, or a fixed fallback string
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Report whether generated text (rather than fallbacks) is expected.

        Returns:
            bool: True if the service is configured
        """
        pass
