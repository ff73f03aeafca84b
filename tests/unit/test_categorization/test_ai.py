from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import pytest

from ledgerwise.categorization.ai import (
    AIClassifier,
    parse_reply,
    resolve_category,
    resolve_description,
)
from ledgerwise.core.exceptions import ClassifierUnavailableError


def _reply(text: str) -> SimpleNamespace:
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])


def _client(**create_kwargs) -> MagicMock:
    client = MagicMock()
    client.messages.create = AsyncMock(**create_kwargs)
    return client


def _api_request() -> httpx.Request:
    return httpx.Request("POST", "https://api.anthropic.com/v1/messages")


class TestParseReply:
    def test_bare_json(self):
        assert parse_reply('{"שופרסל דיל": "מזון"}') == {"שופרסל דיל": "מזון"}

    def test_code_fence(self):
        assert parse_reply('```json\n{"סונול": "רכב"}\n```') == {"סונול": "רכב"}

    def test_object_embedded_in_prose(self):
        content = 'Here you go:\n{"SUPER PHARM": "בריאות"}\nLet me know.'
        assert parse_reply(content) == {"SUPER PHARM": "בריאות"}

    def test_typographic_quotes(self):
        assert parse_reply("{“שופרסל”: “מזון”}") == {"שופרסל": "מזון"}

    def test_drops_blank_and_non_string_values(self):
        assert parse_reply('{"a": "", "b": 3, " c ": " מזון "}') == {"c": "מזון"}

    def test_garbage(self):
        assert parse_reply("sorry, I can't help") == {}
        assert parse_reply('["not", "an", "object"]') == {}
        assert parse_reply("") == {}


class TestResolve:
    def test_exact_then_trimmed_then_normalized(self):
        mapping = {"abc": "X", "SUPER-PHARM 12": "בריאות"}
        assert resolve_description(mapping, "abc") == "X"
        assert resolve_description(mapping, "  abc  ") == "X"
        assert resolve_description(mapping, "super pharm 12") == "בריאות"
        assert resolve_description(mapping, "missing") is None

    def test_category_name_is_case_sensitive(self):
        categories = [SimpleNamespace(name="Food"), SimpleNamespace(name="מזון")]
        assert resolve_category("מזון", categories) is categories[1]
        assert resolve_category("food", categories) is None
        assert resolve_category(None, categories) is None


class TestAIClassifier:
    @pytest.mark.asyncio
    async def test_disabled_without_key(self):
        client = _client()
        classifier = AIClassifier(api_key="", client=client)

        assert classifier.enabled is False
        assert await classifier.classify(["שופרסל"], ["מזון"]) == {}
        client.messages.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_classify_success(self):
        client = _client(return_value=_reply('```json\n{"שופרסל דיל": "מזון"}\n```'))
        classifier = AIClassifier(api_key="test-key", model="test-model", client=client)

        result = await classifier.classify(["שופרסל דיל"], ["מזון", "רכב"])

        assert result == {"שופרסל דיל": "מזון"}
        kwargs = client.messages.create.await_args.kwargs
        assert kwargs["model"] == "test-model"
        prompt = kwargs["messages"][0]["content"]
        assert "1. שופרסל דיל" in prompt
        assert "מזון, רכב" in prompt

    @pytest.mark.asyncio
    async def test_timeout_degrades_to_empty(self):
        client = _client(side_effect=anthropic.APITimeoutError(request=_api_request()))
        classifier = AIClassifier(api_key="k", client=client)

        assert await classifier.classify(["שופרסל"], ["מזון"]) == {}

    @pytest.mark.asyncio
    async def test_timeout_raises_unavailable(self):
        client = _client(side_effect=anthropic.APITimeoutError(request=_api_request()))
        classifier = AIClassifier(api_key="k", client=client)

        with pytest.raises(ClassifierUnavailableError) as exc_info:
            await classifier._request("prompt")
        assert exc_info.value.details == {"error_type": "timeout"}

    @pytest.mark.asyncio
    async def test_server_error_raises_unavailable(self):
        error = anthropic.InternalServerError(
            "boom", response=httpx.Response(500, request=_api_request()), body=None
        )
        classifier = AIClassifier(api_key="k", client=_client(side_effect=error))

        with pytest.raises(ClassifierUnavailableError) as exc_info:
            await classifier._request("prompt")
        assert exc_info.value.error_code == "AI_001"
        assert exc_info.value.http_status == 503

    @pytest.mark.asyncio
    async def test_empty_content_degrades_to_empty(self):
        classifier = AIClassifier(api_key="k", client=_client(return_value=SimpleNamespace(content=[])))
        assert await classifier.classify(["שופרסל"], ["מזון"]) == {}

    @pytest.mark.asyncio
    async def test_no_descriptions(self):
        client = _client()
        classifier = AIClassifier(api_key="k", client=client)

        assert await classifier.classify([], ["מזון"]) == {}
        client.messages.create.assert_not_awaited()

    def test_sdk_client_built_lazily_with_timeout(self):
        classifier = AIClassifier(api_key="k", timeout_seconds=5.0)

        with patch("ledgerwise.categorization.ai.anthropic.AsyncAnthropic") as sdk:
            first = classifier.client
            second = classifier.client

        assert first is second
        sdk.assert_called_once()
        assert sdk.call_args.kwargs["api_key"] == "k"
        assert sdk.call_args.kwargs["timeout"] == 5.0
