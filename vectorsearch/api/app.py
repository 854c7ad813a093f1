"""
FastAPI application for the vector search relay.

The shared ``httpx.AsyncClient`` and the MongoDB client are opened once in
the lifespan hook and closed on shutdown. Settings are read from the
environment at startup; missing secrets abort startup.
"""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from vectorsearch.api.routes.search import router as search_router
from vectorsearch.config import Settings
from vectorsearch.errors import RelayError
from vectorsearch.util.embedding import EmbeddingClient
from vectorsearch.util.mongo_client import VectorSearchGateway

logger = logging.getLogger(__name__)


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    logger.error(
        f"[RELAY] {request.method} {request.url.path} failed: "
        f"{exc.error_code}: {exc.message}",
        exc_info=exc,
    )
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


def create_app(settings: Settings | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        resolved = settings if settings is not None else Settings.from_env()
        # Mongo first: it parses the URI and may raise; the httpx client cannot
        gateway = VectorSearchGateway.from_settings(resolved)
        http_client = httpx.AsyncClient(timeout=resolved.REQUEST_TIMEOUT)
        app.state.settings = resolved
        app.state.embedder = EmbeddingClient.from_settings(resolved, http_client)
        app.state.gateway = gateway
        logger.info(
            f"[STARTUP] model={resolved.EMBEDDING_MODEL} "
            f"collection={resolved.MONGODB_DATABASE}.{resolved.MONGODB_COLLECTION} "
            f"index={resolved.VECTOR_INDEX_NAME} stage={resolved.SEARCH_STAGE}"
        )
        try:
            yield
        finally:
            await http_client.aclose()
            await gateway.close()

    app = FastAPI(
        title="Vector Search Relay",
        description="Embeds a text query and runs a k-NN search over a MongoDB Atlas collection.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_exception_handler(RelayError, relay_error_handler)
    app.include_router(search_router)
    return app


app = create_app()
