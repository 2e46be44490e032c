"""Tests for the OpenAI provider and registration key extraction."""

import pytest

from evntboard_openai.provider import (
    OpenAIProvider,
    ProviderNotConfiguredError,
    dump_result,
    extract_api_key,
)

from tests.conftest import FakeModel


class TestExtractApiKey:
    def test_finds_api_key_entry(self):
        entries = [
            {"key": "organization", "value": "org-1"},
            {"key": "apiKey", "value": "X"},
        ]
        assert extract_api_key(entries) == "X"

    def test_first_match_wins(self):
        entries = [{"key": "apiKey", "value": "first"}, {"key": "apiKey", "value": "2"}]
        assert extract_api_key(entries) == "first"

    def test_missing_entry(self):
        assert extract_api_key([{"key": "other", "value": "1"}]) is None

    @pytest.mark.parametrize("result", [None, {}, "apiKey", 3, [None, "x"]])
    def test_unexpected_shapes(self, result):
        assert extract_api_key(result) is None


class TestOpenAIProvider:
    def test_client_uses_given_api_key(self):
        provider = OpenAIProvider("X")

        assert provider.is_configured
        assert provider.api_key == "X"
        assert provider.client.api_key == "X"

    def test_missing_key_fails_on_use_not_on_construction(self, caplog):
        provider = OpenAIProvider(None)

        assert not provider.is_configured
        assert provider.api_key is None
        assert "openai_api_key_missing" in caplog.text
        with pytest.raises(ProviderNotConfiguredError):
            _ = provider.client

    def test_empty_key_counts_as_missing(self):
        assert not OpenAIProvider("").is_configured


def test_dump_result_uses_json_mode():
    assert dump_result(FakeModel(id="run_1", status="queued")) == {
        "id": "run_1",
        "status": "queued",
    }
    assert dump_result({"plain": True}) == {"plain": True}
