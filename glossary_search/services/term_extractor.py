"""Ask Claude for terms in a text that deserve a dictionary entry."""

import json
from typing import Any, List, Optional

import structlog
from anthropic import Anthropic, APIError

from ..config.settings import Settings

logger = structlog.get_logger()

SYSTEM_PROMPT = (
    "You are a helpful assistant that identifies technical terms and jargon in text. "
    "Return ONLY a JSON array of strings."
)


def build_default_prompt(text: str) -> str:
    """Prompt used by ``index_text`` when the caller supplies none."""
    return f"""Analyze the following text and identify technical terms, acronyms, jargon, or specialized vocabulary that might need definitions. Return ONLY a JSON array of strings, with each string being a term that should be added to a dictionary. Do not include common words or terms that are self-explanatory.

Text to analyze:
{text}

Example response: ["API", "REST", "microservices", "CI/CD"]"""


class TermExtractor:
    """Thin wrapper around the Anthropic Messages API that returns term lists."""

    def __init__(self, settings: Settings, client: Optional[Any] = None) -> None:
        """
        Initialize the extractor.

        Args:
            settings: Application settings (API key, model, sampling options)
            client: Pre-built Anthropic client; created from the API key when omitted
        """
        self.settings = settings
        self.client = client
        if self.client is None and settings.anthropic_api_key:
            self.client = Anthropic(
                api_key=settings.anthropic_api_key,
                timeout=settings.llm_timeout,
            )

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    def suggest_terms(self, prompt: str) -> List[str]:
        """
        Send a prompt and parse the reply as a JSON array of strings.

        Returns:
            The suggested terms, or an empty list when the extractor is not
            configured, the call fails or the reply is not a list of strings
        """
        if not self.is_configured:
            return []

        try:
            response = self.client.messages.create(
                model=self.settings.anthropic_model,
                max_tokens=self.settings.anthropic_max_tokens,
                temperature=self.settings.anthropic_temperature,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
        except APIError as e:
            logger.warning("Term extraction request failed", error=str(e))
            return []

        if not response.content:
            logger.warning("Term extraction returned no content")
            return []

        reply = response.content[0].text.strip()
        try:
            terms = json.loads(reply)
        except json.JSONDecodeError:
            logger.warning("Term extraction reply is not JSON", reply=reply[:200])
            return []

        if not isinstance(terms, list) or not all(isinstance(term, str) for term in terms):
            logger.warning("Term extraction reply is not a list of strings", reply=reply[:200])
            return []

        logger.info("Terms extracted", count=len(terms), model=self.settings.anthropic_model)
        return terms
