from vectorsearch.util.embedding import EmbeddingClient, fetch_embedding
from vectorsearch.util.mongo_client import VectorSearchGateway, build_pipeline

__all__ = ["EmbeddingClient", "fetch_embedding", "VectorSearchGateway", "build_pipeline"]
