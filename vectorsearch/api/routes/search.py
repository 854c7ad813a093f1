"""
Routes for the vector search relay.

Provides:
- GET /vectorSearch/{query}: embed the query, run the k-NN aggregation,
  return the matching documents as a JSON array
- GET /healthz

Upstream failures are raised as ``RelayError`` subclasses and rendered by
the handler registered in ``vectorsearch.api.app``.
"""

import logging

from bson import ObjectId
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from vectorsearch.util.embedding import EmbeddingClient
from vectorsearch.util.mongo_client import VectorSearchGateway

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Dependencies (resources are created once in the app lifespan)
# ---------------------------------------------------------------------------

def get_embedder(request: Request) -> EmbeddingClient:
    return request.app.state.embedder


def get_gateway(request: Request) -> VectorSearchGateway:
    return request.app.state.gateway


def render_documents(documents: list[dict]) -> list:
    """Make store documents JSON-safe (ObjectId -> hex string)."""
    return jsonable_encoder(documents, custom_encoder={ObjectId: str})


# ---------------------------------------------------------------------------
# GET /vectorSearch/{query}
# ---------------------------------------------------------------------------

@router.get("/vectorSearch/{query:path}", tags=["search"])
async def vector_search(
    query: str,
    embedder: EmbeddingClient = Depends(get_embedder),
    gateway: VectorSearchGateway = Depends(get_gateway),
):
    """
    Embed ``query`` and return the nearest documents, most similar first.

    The query is the rest of the decoded path, so it may contain ``/``.
    """
    if not query:
        raise HTTPException(status_code=404, detail="Not Found")
    embedding = await embedder.embed(query)
    documents = await gateway.search(embedding)
    logger.info(f"[RELAY] query_length={len(query)} results={len(documents)}")
    return JSONResponse(render_documents(documents))


# ---------------------------------------------------------------------------
# GET /healthz
# ---------------------------------------------------------------------------

@router.get("/healthz", tags=["health"])
async def healthz(
    embedder: EmbeddingClient = Depends(get_embedder),
    gateway: VectorSearchGateway = Depends(get_gateway),
):
    return {"status": "ok", "model": embedder.model, "index": gateway.index_name}
