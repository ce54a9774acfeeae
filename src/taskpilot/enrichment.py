"""Summary: Best-effort external suggestions for task descriptions.

Importance: Fills blank descriptions without making task creation depend on a third party.
Alternatives: Leave descriptions empty or generate them locally.
"""

from __future__ import annotations

import http.client
import json
import logging
import math
import urllib.request

from taskpilot.errors import ErrorKind, Outcome


logger = logging.getLogger(__name__)

DEFAULT_ENRICHMENT_URL = "https://jsonplaceholder.typicode.com/posts/1"
DEFAULT_TIMEOUT_SECONDS = 5.0
FALLBACK_SUGGESTION = "Focus on completing pending tasks."


class EnrichmentClient:
    """Summary: Fetches a suggested description from a fixed content endpoint.

    Importance: Callers can treat suggest() as always succeeding.
    Alternatives: Use an AI provider to draft descriptions.
    """

    def __init__(self, url: str = DEFAULT_ENRICHMENT_URL, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        if not math.isfinite(timeout) or timeout <= 0:
            raise ValueError("Enrichment timeout must be a positive, finite number of seconds")
        self._url = url
        self._timeout = timeout

    def suggest(self) -> str:
        """Summary: Return a suggestion, or the fallback text on any failure.

        Importance: Keeps the enrichment a decorator rather than a hard dependency.
        Alternatives: Propagate errors and let the caller decide.
        """

        outcome = self.fetch()
        if outcome.ok and outcome.value:
            return outcome.value
        return FALLBACK_SUGGESTION

    def fetch(self) -> Outcome[str]:
        """Summary: Perform one GET against the endpoint and read its "body" field.

        Importance: Exposes enrichment failures as an explicit outcome; no retries.
        Alternatives: Retry with backoff before giving up.
        """

        request = urllib.request.Request(
            url=self._url,
            headers={"Accept": "application/json"},
            method="GET",
        )
        try:
            with urllib.request.urlopen(request, timeout=self._timeout) as response:
                raw = json.loads(response.read().decode("utf-8"))
        except (OSError, ValueError, http.client.HTTPException) as exc:
            # URLError, HTTPError and timeouts are OSError; bad JSON or encoding is ValueError;
            # garbled status lines and truncated bodies are http.client.HTTPException.
            logger.warning("Enrichment request to %s failed: %s", self._url, exc)
            return Outcome.failure(ErrorKind.ENRICHMENT_UNAVAILABLE)
        body = raw.get("body") if isinstance(raw, dict) else None
        if not isinstance(body, str) or not body.strip():
            logger.warning("Enrichment response from %s had no usable body.", self._url)
            return Outcome.failure(ErrorKind.ENRICHMENT_UNAVAILABLE)
        return Outcome.success(body)
