"""Analysis provider backed by the Word Wizard proxy API."""

import asyncio
import json
import logging
import time
from dataclasses import replace

import requests

from word_wizard.exceptions import NetworkError, ProviderError
from word_wizard.models import (
    PROVENANCE_PROVIDER,
    AnalysisRequest,
    WordFamilyItem,
    WordRecord,
)
from word_wizard.models.word import MAX_SURFACED_EXAMPLES

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class ProxyAnalysisProvider:
    """Online analysis provider using the Word Wizard proxy.

    Implements AnalysisProvider protocol. The HTTP calls are blocking and
    run in a worker thread so the event loop stays responsive.
    """

    def __init__(
        self,
        api_url: str = "http://localhost:3001",
        model: str = "word-wizard-optimized",
        timeout: float = 30.0,
        user_id: str | None = None,
    ):
        """Initialize with the proxy URL and model name.

        Args:
            api_url: Base URL of the proxy API.
            model: Model identifier sent with every analysis request.
            timeout: Seconds to wait for each HTTP response.
            user_id: Optional account id forwarded for billing.
        """
        self._api_url = api_url.rstrip("/")
        self._model = model
        self._timeout = timeout
        self._user_id = user_id

    @property
    def name(self) -> str:
        return "Word Wizard Proxy"

    async def analyze(self, request: AnalysisRequest) -> WordRecord:
        """Analyse a term and optionally attach a generated image."""
        payload = await asyncio.to_thread(
            self._post,
            "/ai/word-analysis",
            {"prompt": build_analysis_prompt(request), "userId": self._user_id, "model": self._model},
        )
        record = parse_word_analysis(payload.get("analysis"), request)

        if request.options.include_image:
            image_url = await asyncio.to_thread(self._generate_image, request.term)
            if image_url:
                record = replace(record, image_url=image_url)
        return record

    def _generate_image(self, term: str) -> str | None:
        """Request an illustration; failures only drop the image."""
        try:
            payload = self._post(
                "/ai/generate-image",
                {"term": term, "userId": self._user_id, "style": "educational"},
            )
        except ProviderError as e:
            logger.warning("Image generation failed for '%s': %s", term, e)
            return None
        return payload.get("imageUrl") or None

    def _post(self, path: str, body: dict) -> dict:
        """POST to the proxy and return the decoded JSON object.

        Raises:
            NetworkError: On connection failures and timeouts
            ProviderError: On error status codes or unparsable bodies
        """
        try:
            response = requests.post(f"{self._api_url}{path}", json=body, timeout=self._timeout)
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            raise NetworkError(f"Cannot reach the analysis service: {e}") from e
        except requests.RequestException as e:
            raise ProviderError(f"Analysis request failed: {e}") from e

        if response.status_code == 429:
            raise ProviderError("Rate limit exceeded. Please try again in a moment.", retryable=True)
        if response.status_code == 401:
            raise ProviderError("Authentication failed. Please check your API key.")
        if response.status_code >= 400:
            raise ProviderError(
                f"Analysis service returned HTTP {response.status_code}",
                retryable=response.status_code in RETRYABLE_STATUS,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderError("Analysis service returned invalid JSON") from e
        if not isinstance(payload, dict):
            raise ProviderError("Analysis service returned an unexpected response")
        return payload


def build_analysis_prompt(request: AnalysisRequest) -> str:
    """Build the structured analysis prompt for a term."""
    options = request.options
    complexity = options.complexity_level
    context = f' in context: "{request.context}"' if request.context else ""
    lines = [
        f'Analyze the word "{request.term}"{context}.',
        "",
        f"Complexity Level: {complexity}",
        f"Include Examples: {str(options.include_examples).lower()}",
        f"Include Word Family: {str(options.include_word_family).lower()}",
    ]
    if options.generate_synonyms:
        lines.append("Generate comprehensive synonyms with IELTS context.")
    lines += [
        "",
        "Provide structured analysis in JSON format:",
        "{",
        f'  "term": "{request.term}",',
        '  "ipa": "pronunciation",',
        f'  "definition": "clear definition for {complexity} level",',
        '  "examples": ["context example 1", "context example 2"],',
        '  "wordFamily": [{"word": "related", "type": "noun", "definition": "..."}],',
        '  "synonyms": ["synonym1", "synonym2"],',
        '  "antonyms": ["antonym1"],',
        '  "primaryTopic": "main category",',
        '  "domain": "academic/business/daily",',
        '  "cefrLevel": "A1-C2"',
        "}",
    ]
    return "\n".join(lines)


def parse_word_analysis(analysis: object, request: AnalysisRequest) -> WordRecord:
    """Convert the provider's JSON analysis into a WordRecord.

    Missing lists become empty and a missing term falls back to the
    requested one.

    Raises:
        ProviderError: If the analysis is not a JSON object
    """
    if isinstance(analysis, str):
        try:
            analysis = json.loads(analysis)
        except ValueError as e:
            raise ProviderError(f"Failed to parse analysis for '{request.term}'") from e
    if not isinstance(analysis, dict):
        raise ProviderError(f"Failed to parse analysis for '{request.term}'")

    def str_list(key: str) -> list[str]:
        value = analysis.get(key)
        return [str(item) for item in value if item] if isinstance(value, list) else []

    family = analysis.get("wordFamily")
    word_family = tuple(
        WordFamilyItem(
            word=str(item["word"]),
            type=str(item.get("type") or ""),
            definition=str(item.get("definition") or ""),
            example=str(item.get("example") or ""),
        )
        for item in (family if isinstance(family, list) else [])
        if isinstance(item, dict) and item.get("word")
    )

    examples = str_list("examples") if request.options.include_examples else []
    return WordRecord(
        term=str(analysis.get("term") or request.term).strip() or request.term,
        definition=str(analysis.get("definition") or ""),
        phonetic=str(analysis.get("ipa") or ""),
        examples=tuple(examples[:MAX_SURFACED_EXAMPLES]),
        synonyms=frozenset(str_list("synonyms")),
        antonyms=frozenset(str_list("antonyms")),
        word_family=word_family if request.options.include_word_family else (),
        topic=str(analysis.get("primaryTopic") or ""),
        domain=str(analysis.get("domain") or ""),
        level=str(analysis.get("cefrLevel") or ""),
        created_at=time.time(),
        provenance=PROVENANCE_PROVIDER,
        context=request.context,
    )
