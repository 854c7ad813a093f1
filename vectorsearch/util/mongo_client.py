"""
Vector search gateway over a MongoDB Atlas collection.

Holds one ``AsyncMongoClient`` for the lifetime of the process and runs a
single approximate k-NN aggregation per query. Connection-level failures
raise ``TransportError``; any other driver error raises ``QueryError``.
"""

import logging
import time

from pymongo import AsyncMongoClient
from pymongo.errors import ConnectionFailure, PyMongoError

from vectorsearch.errors import QueryError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_K = 5
SEARCH_STAGES = ("knnBeta", "vectorSearch")

# $vectorSearch candidate pool, as a multiple of the requested limit
NUM_CANDIDATES_FACTOR = 10


# --- Pipeline ---


def build_pipeline(
    vector: list[float],
    index_name: str,
    vector_field: str,
    k: int = DEFAULT_K,
    strip_embedding: bool = True,
    stage: str = "knnBeta",
) -> list[dict]:
    """
    Build the aggregation pipeline for a k-NN query.

    ``stage="knnBeta"`` emits an Atlas Search ``$search``/``knnBeta`` stage;
    ``stage="vectorSearch"`` emits the ``$vectorSearch`` operator. With
    ``strip_embedding`` the vector field is removed from every result.
    """
    if stage == "knnBeta":
        search_stage = {
            "$search": {
                "index": index_name,
                "knnBeta": {"vector": vector, "path": vector_field, "k": k},
            }
        }
    elif stage == "vectorSearch":
        search_stage = {
            "$vectorSearch": {
                "index": index_name,
                "path": vector_field,
                "queryVector": vector,
                "numCandidates": k * NUM_CANDIDATES_FACTOR,
                "limit": k,
            }
        }
    else:
        raise ValueError(
            f"Unknown search stage {stage!r}, expected one of {SEARCH_STAGES}"
        )

    pipeline = [search_stage]
    if strip_embedding:
        pipeline.append({"$unset": vector_field})
    return pipeline


# --- Gateway ---


class VectorSearchGateway:
    def __init__(
        self,
        client,
        database: str,
        collection: str,
        index_name: str,
        vector_field: str,
        k: int = DEFAULT_K,
        strip_embedding: bool = True,
        stage: str = "knnBeta",
    ):
        if stage not in SEARCH_STAGES:
            raise ValueError(
                f"Unknown search stage {stage!r}, expected one of {SEARCH_STAGES}"
            )
        self.client = client
        self.database = database
        self.collection_name = collection
        self.index_name = index_name
        self.vector_field = vector_field
        self.k = k
        self.strip_embedding = strip_embedding
        self.stage = stage

    @classmethod
    def from_settings(cls, settings, client=None) -> "VectorSearchGateway":
        """Create the gateway, opening the shared Mongo client unless one is given."""
        if client is None:
            client = AsyncMongoClient(settings.MONGODB_URI)
        return cls(
            client,
            database=settings.MONGODB_DATABASE,
            collection=settings.MONGODB_COLLECTION,
            index_name=settings.VECTOR_INDEX_NAME,
            vector_field=settings.VECTOR_FIELD,
            k=settings.SEARCH_K,
            strip_embedding=settings.STRIP_EMBEDDING,
            stage=settings.SEARCH_STAGE,
        )

    @property
    def collection(self):
        return self.client[self.database][self.collection_name]

    async def search(self, vector: list[float]) -> list[dict]:
        """
        Return up to ``k`` documents nearest to ``vector``.

        Order is the store's (descending similarity) and is passed through
        as-is.
        """
        pipeline = build_pipeline(
            vector,
            self.index_name,
            self.vector_field,
            k=self.k,
            strip_embedding=self.strip_embedding,
            stage=self.stage,
        )

        start = time.time()
        try:
            cursor = await self.collection.aggregate(pipeline)
            documents = await cursor.to_list()
        except ConnectionFailure as exc:
            raise TransportError(
                f"MongoDB unreachable: {exc}", service="mongodb"
            ) from exc
        except PyMongoError as exc:
            raise QueryError(f"Vector search aggregation failed: {exc}") from exc

        took_ms = int((time.time() - start) * 1000)
        logger.info(
            f"[VECTOR-SEARCH] index={self.index_name} k={self.k} "
            f"results={len(documents)} took_ms={took_ms}"
        )
        return documents

    async def close(self) -> None:
        await self.client.close()
