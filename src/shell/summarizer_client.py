"""Summarizer Client - Imperative Shell.

This module turns a batch of enriched earthquakes into short alert text
using an OpenAI-compatible chat completion API.
"""

import json
import logging
from typing import Any

from openai import OpenAI, OpenAIError

from src.core.config import SummarizerConfig
from src.core.enrichment import EnrichedEvent, event_to_dict
from src.core.errors import SummarizationError


logger = logging.getLogger(__name__)


SYSTEM_PROMPT = """\
You are a news reporter writing a live blog about one or more earthquakes.
You are given a list of earthquakes in JSON format, including each event's
distance from the reader and an estimated peak ground acceleration in g.
Explain what happened in plain English without quoting the data directly.
Use bullets where helpful. Limit yourself to 3 major points and be concise.
You may style the text with HTML b, i and u tags only."""


class SummarizerClient:
    """Client for generating alert text from earthquake batches.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(self, config: SummarizerConfig | None = None) -> None:
        """Initialize summarizer client.

        Args:
            config: Model, endpoint and timeout settings
        """
        self.config = config or SummarizerConfig()
        self._client: OpenAI | None = None

    @property
    def client(self) -> OpenAI:
        """Lazy initialization of the OpenAI client."""
        if self._client is None:
            kwargs: dict[str, Any] = {"timeout": self.config.timeout_seconds}
            if self.config.api_key:
                kwargs["api_key"] = self.config.api_key
            if self.config.base_url:
                kwargs["base_url"] = self.config.base_url
            self._client = OpenAI(**kwargs)
        return self._client

    def summarize(self, events: list[EnrichedEvent]) -> str:
        """Generate alert text for a batch of earthquakes.

        This method performs HTTP I/O.

        Args:
            events: Events of a single tier

        Returns:
            Alert text, possibly containing <b>, <i> and <u> markup

        Raises:
            SummarizationError: If the call fails or returns no text
        """
        data = json.dumps([event_to_dict(e) for e in events], ensure_ascii=False)

        logger.info(
            "Requesting summary for %d earthquakes from %s",
            len(events),
            self.config.model,
        )

        try:
            response = self.client.chat.completions.create(
                model=self.config.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": data},
                ],
            )
        except OpenAIError as e:
            raise SummarizationError(f"Summary request failed: {e}") from e

        if not response.choices:
            raise SummarizationError("Summary response contained no choices")

        content = response.choices[0].message.content
        if not content or not content.strip():
            raise SummarizationError("Summary response was empty")

        logger.info("Received summary (%d chars)", len(content))
        return content.strip()
