import asyncio

from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.runnables import RunnableLambda

from najaf.services.ai import (
    ANALYSIS_FALLBACK,
    ANALYSIS_MISSING_KEY,
    DESCRIPTION_FALLBACK,
    DESCRIPTION_MISSING_KEY,
    MockTextGenerationService,
    OpenAITextGenerationService,
    get_text_generation_service,
)


def unreachable(_):
    raise ConnectionError("api.openai.com unreachable")


def test_missing_api_key_returns_fixed_text():
    service = OpenAITextGenerationService()
    assert asyncio.run(service.describe_dish("Burger")) == DESCRIPTION_MISSING_KEY
    assert asyncio.run(service.analyze_sales("Total Orders: 0")) == ANALYSIS_MISSING_KEY
    assert asyncio.run(service.health_check()) is False


def test_unreachable_model_returns_fallback():
    service = OpenAITextGenerationService(llm=RunnableLambda(unreachable))
    assert asyncio.run(service.describe_dish("Burger")) == "وصف شهي ولذيذ."
    assert asyncio.run(service.analyze_sales("Total Orders: 3")) == ANALYSIS_FALLBACK


def test_model_output_is_trimmed():
    llm = FakeListChatModel(responses=["  برجر لحم مشوي بصوص خاص.  \n"])
    service = OpenAITextGenerationService(llm=llm)
    assert asyncio.run(service.describe_dish("برجر")) == "برجر لحم مشوي بصوص خاص."


def test_empty_model_output_uses_fallback():
    service = OpenAITextGenerationService(llm=FakeListChatModel(responses=["   "]))
    assert asyncio.run(service.describe_dish("برجر")) == DESCRIPTION_FALLBACK


def test_development_mode_uses_mock():
    service = get_text_generation_service()
    assert isinstance(service, MockTextGenerationService)
    assert asyncio.run(service.describe_dish("برجر"))
