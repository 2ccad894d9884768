"""Tests for the proxy analysis provider."""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from word_wizard.exceptions import NetworkError, ProviderError
from word_wizard.models import AnalysisRequest, LookupOptions
from word_wizard.services.providers.proxy_provider import (
    ProxyAnalysisProvider,
    build_analysis_prompt,
    parse_word_analysis,
)

ANALYSIS = {
    "term": "resolve",
    "ipa": "/rɪˈzɒlv/",
    "definition": "to find a solution",
    "examples": ["a", "b", "c", "d"],
    "wordFamily": [{"word": "resolution", "type": "noun", "definition": "a decision"}],
    "synonyms": ["settle", "solve"],
    "antonyms": ["complicate"],
    "primaryTopic": "Problem Solving",
    "domain": "academic",
    "cefrLevel": "B2",
}


def _mock_response(body=None, status_code=200):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = body
    return resp


class TestBuildAnalysisPrompt:
    def test_includes_term_context_and_options(self):
        request = AnalysisRequest(
            term="bank",
            context="river bank",
            options=LookupOptions(complexity_level="simple", include_examples=False),
        )
        prompt = build_analysis_prompt(request)

        assert 'Analyze the word "bank" in context: "river bank".' in prompt
        assert "Complexity Level: simple" in prompt
        assert "Include Examples: false" in prompt
        assert "Include Word Family: true" in prompt

    def test_synonym_instruction(self):
        request = AnalysisRequest(term="big", options=LookupOptions(generate_synonyms=True))
        assert "synonyms" in build_analysis_prompt(request).lower()


class TestParseWordAnalysis:
    """Tests for parse_word_analysis."""

    def test_parses_json_string(self):
        record = parse_word_analysis(json.dumps(ANALYSIS), AnalysisRequest(term="resolve"))

        assert record.term == "resolve"
        assert record.phonetic == "/rɪˈzɒlv/"
        assert record.examples == ("a", "b", "c")
        assert record.synonyms == frozenset({"settle", "solve"})
        assert record.word_family[0].word == "resolution"
        assert record.topic == "Problem Solving"
        assert record.level == "B2"
        assert record.provenance == "provider"

    def test_missing_fields_default(self):
        record = parse_word_analysis({"definition": "x"}, AnalysisRequest(term="resolve"))

        assert record.term == "resolve"
        assert record.examples == ()
        assert record.word_family == ()
        assert record.synonyms == frozenset()

    def test_respects_disabled_sections(self):
        request = AnalysisRequest(
            term="resolve",
            options=LookupOptions(include_examples=False, include_word_family=False),
        )
        record = parse_word_analysis(ANALYSIS, request)

        assert record.examples == ()
        assert record.word_family == ()

    def test_invalid_json(self):
        with pytest.raises(ProviderError):
            parse_word_analysis("{broken", AnalysisRequest(term="resolve"))

    def test_not_an_object(self):
        with pytest.raises(ProviderError):
            parse_word_analysis(["list"], AnalysisRequest(term="resolve"))


@pytest.mark.asyncio
class TestAnalyze:
    """Tests for ProxyAnalysisProvider.analyze."""

    async def test_success(self):
        provider = ProxyAnalysisProvider(api_url="http://proxy.test/")

        with patch(
            "requests.post", return_value=_mock_response({"analysis": json.dumps(ANALYSIS)})
        ) as mock_post:
            record = await provider.analyze(AnalysisRequest(term="resolve"))

        assert record.definition == "to find a solution"
        assert mock_post.call_args.args[0] == "http://proxy.test/ai/word-analysis"
        assert mock_post.call_args.kwargs["json"]["model"] == "word-wizard-optimized"

    async def test_image_attached(self):
        provider = ProxyAnalysisProvider()
        responses = [
            _mock_response({"analysis": ANALYSIS}),
            _mock_response({"imageUrl": "https://img.test/resolve.png"}),
        ]

        with patch("requests.post", side_effect=responses):
            record = await provider.analyze(
                AnalysisRequest(term="resolve", options=LookupOptions(include_image=True))
            )

        assert record.image_url == "https://img.test/resolve.png"

    async def test_image_failure_keeps_record(self):
        provider = ProxyAnalysisProvider()
        responses = [
            _mock_response({"analysis": ANALYSIS}),
            _mock_response({}, status_code=500),
        ]

        with patch("requests.post", side_effect=responses):
            record = await provider.analyze(
                AnalysisRequest(term="resolve", options=LookupOptions(include_image=True))
            )

        assert record.image_url is None
        assert record.term == "resolve"

    async def test_connection_error_is_network_error(self):
        provider = ProxyAnalysisProvider()

        with (
            patch("requests.post", side_effect=requests.exceptions.ConnectionError()),
            pytest.raises(NetworkError) as excinfo,
        ):
            await provider.analyze(AnalysisRequest(term="resolve"))

        assert excinfo.value.retryable is True

    async def test_timeout_is_network_error(self):
        provider = ProxyAnalysisProvider()

        with (
            patch("requests.post", side_effect=requests.exceptions.Timeout()),
            pytest.raises(NetworkError),
        ):
            await provider.analyze(AnalysisRequest(term="resolve"))

    @pytest.mark.parametrize("status,retryable", [(429, True), (503, True), (400, False), (401, False)])
    async def test_error_status(self, status, retryable):
        provider = ProxyAnalysisProvider()

        with (
            patch("requests.post", return_value=_mock_response({}, status_code=status)),
            pytest.raises(ProviderError) as excinfo,
        ):
            await provider.analyze(AnalysisRequest(term="resolve"))

        assert excinfo.value.retryable is retryable

    async def test_invalid_json_body(self):
        provider = ProxyAnalysisProvider()
        resp = _mock_response()
        resp.json.side_effect = ValueError("no json")

        with patch("requests.post", return_value=resp), pytest.raises(ProviderError):
            await provider.analyze(AnalysisRequest(term="resolve"))
