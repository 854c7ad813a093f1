"""
Embedding client for query vector computation.

Calls the hosted embeddings endpoint (OpenAI ``/v1/embeddings``) with httpx
and returns the first result vector. A single attempt is made per query:
non-success statuses raise ``ProviderError``, network failures raise
``TransportError``.
"""

import logging

import httpx

from vectorsearch.config import DEFAULT_EMBEDDING_MODEL, DEFAULT_EMBEDDINGS_URL
from vectorsearch.errors import ProviderError, TransportError

logger = logging.getLogger(__name__)


def _headers(api_key: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }


def _provider_message(resp: httpx.Response) -> str:
    """Best-effort extraction of the provider's error message."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:200]
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
    return resp.text[:200]


async def fetch_embedding(
    query: str,
    http_client: httpx.AsyncClient,
    api_key: str,
    url: str = DEFAULT_EMBEDDINGS_URL,
    model: str = DEFAULT_EMBEDDING_MODEL,
) -> list[float]:
    """
    Embed ``query`` and return the first vector of the response.

    Raises:
        TransportError: the endpoint could not be reached.
        ProviderError: non-2xx status, or a success body without a non-empty
            ``data[0].embedding`` list.
    """
    try:
        resp = await http_client.post(
            url,
            json={"input": query, "model": model},
            headers=_headers(api_key),
        )
    except httpx.TransportError as exc:
        raise TransportError(
            f"Embedding request failed: {exc}", service="embedding"
        ) from exc

    if not resp.is_success:
        raise ProviderError(
            f"Failed to get embedding with code: {resp.status_code} "
            f"({_provider_message(resp)})",
            upstream_status=resp.status_code,
        )

    try:
        embedding = resp.json()["data"][0]["embedding"]
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise ProviderError(
            f"Malformed embedding response: {exc!r}",
            upstream_status=resp.status_code,
        ) from exc
    if not isinstance(embedding, list) or not embedding:
        raise ProviderError(
            f"Malformed embedding response: embedding is {embedding!r}",
            upstream_status=resp.status_code,
        )

    logger.debug("[EMBEDDING] model=%s dimensions=%d", model, len(embedding))
    return embedding


class EmbeddingClient:
    """Binds credentials and model to a shared ``httpx.AsyncClient``."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str,
        url: str = DEFAULT_EMBEDDINGS_URL,
        model: str = DEFAULT_EMBEDDING_MODEL,
    ):
        self.http_client = http_client
        self.api_key = api_key
        self.url = url
        self.model = model

    @classmethod
    def from_settings(cls, settings, http_client: httpx.AsyncClient) -> "EmbeddingClient":
        return cls(
            http_client,
            api_key=settings.OPENAI_API_KEY,
            url=settings.EMBEDDINGS_URL,
            model=settings.EMBEDDING_MODEL,
        )

    async def embed(self, query: str) -> list[float]:
        return await fetch_embedding(
            query, self.http_client, self.api_key, url=self.url, model=self.model
        )
