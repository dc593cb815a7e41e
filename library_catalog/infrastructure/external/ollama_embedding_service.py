"""
Ollama embeddings client implementing the EmbeddingService port.

=============================================================================
Wire format
=============================================================================

    POST {base_url}/api/embeddings
        {"model": "nomic-embed-text", "prompt": "<text>"}
    200 {"embedding": [0.12, -0.03, ...]}

    GET {base_url}/api/tags          (health probe)

Every transport failure (connection refused, timeout), HTTP error status and
malformed body is reported as EmbeddingServiceUnavailableError. The client
never retries.

=============================================================================
Dependency Injection for Testability
=============================================================================

The constructor accepts an optional `session` parameter:
- In production: uses requests.Session() by default
- In tests: inject a fake session that returns canned responses or raises
=============================================================================
"""

import logging
from typing import Any, Optional

import requests

from library_catalog.domain.ports import EmbeddingService
from library_catalog.domain.services.errors import (
    EmbeddingServiceUnavailableError,
    EmbeddingTextTooLongError,
)
from library_catalog.domain.value_objects import EmbeddingResult

logger = logging.getLogger(__name__)

MAX_TEXT_LENGTH = 7000
DEFAULT_TIMEOUT_SECONDS = 30.0


class OllamaEmbeddingService(EmbeddingService):
    """
    Usage:
        # Production
        service = OllamaEmbeddingService("http://ollama:11434", "nomic-embed-text")
        result = service.generate_embedding("Clean Code Robert C. Martin ...")

        # Testing (with fake session)
        service = OllamaEmbeddingService("http://ollama", "m", session=fake_session)
    """

    def __init__(
        self,
        base_url: str,
        model: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[Any] = None,
    ) -> None:
        """
        Initialize the Ollama client.

        Args:
            base_url: Ollama server root, e.g. "http://ollama:11434"
            model: Embedding model name
            timeout_seconds: Bound on each HTTP call
            session: Optional HTTP session for dependency injection.
                    If None, creates a new requests.Session().
        """
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._timeout = timeout_seconds
        self._session = session if session is not None else requests.Session()

    @property
    def model(self) -> str:
        return self._model

    def generate_embedding(self, text: str) -> EmbeddingResult:
        """
        Generate an embedding vector for the given text.

        Raises:
            EmbeddingTextTooLongError: If the trimmed text exceeds 7000
                characters (no request is made)
            EmbeddingServiceUnavailableError: On transport errors, HTTP
                errors and malformed responses
        """
        prompt = text.strip()
        if len(prompt) > MAX_TEXT_LENGTH:
            raise EmbeddingTextTooLongError(len(prompt), MAX_TEXT_LENGTH)

        url = f"{self._base_url}/api/embeddings"
        try:
            response = self._session.post(
                url,
                json={"model": self._model, "prompt": prompt},
                timeout=self._timeout,
            )
        except requests.Timeout as e:
            logger.error(f"Ollama request timed out after {self._timeout}s")
            raise EmbeddingServiceUnavailableError("Request timeout") from e
        except requests.RequestException as e:
            logger.error(f"Ollama request failed: {e}")
            raise EmbeddingServiceUnavailableError(str(e)) from e

        if response.status_code >= 400:
            logger.error(f"Ollama returned HTTP {response.status_code}")
            raise EmbeddingServiceUnavailableError(
                f"HTTP {response.status_code}: {response.reason}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise EmbeddingServiceUnavailableError(
                "Invalid response format: body is not JSON"
            ) from e

        embedding = data.get("embedding") if isinstance(data, dict) else None
        if not isinstance(embedding, list) or not embedding:
            raise EmbeddingServiceUnavailableError(
                "Invalid response format: missing embedding array"
            )

        try:
            vector = [float(v) for v in embedding]
        except (TypeError, ValueError) as e:
            raise EmbeddingServiceUnavailableError(
                "Invalid response format: embedding is not numeric"
            ) from e

        logger.debug(f"Embedding generated: model={self._model}, dim={len(vector)}")
        return EmbeddingResult(embedding=vector, model=self._model)

    def is_available(self) -> bool:
        """GET /api/tags; any failure means unavailable."""
        try:
            response = self._session.get(f"{self._base_url}/api/tags", timeout=self._timeout)
        except requests.RequestException as e:
            logger.warning(f"Ollama health check failed: {e}")
            return False
        return response.status_code < 400
