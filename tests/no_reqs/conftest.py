import copy

import pytest
from bson import ObjectId

from vectorsearch.config import Settings

QUERY_VECTOR = [0.125, -0.5, 0.75, 0.0]


class FakeCursor:
    def __init__(self, documents):
        self._documents = documents

    async def to_list(self, length=None):
        return self._documents


class FakeCollection:
    """Stands in for an Atlas collection: applies the limit and $unset stages."""

    def __init__(self, documents, error=None):
        self.documents = documents
        self.error = error
        self.pipelines = []

    async def aggregate(self, pipeline):
        self.pipelines.append(pipeline)
        if self.error is not None:
            raise self.error
        search = pipeline[0].get("$search", {}).get("knnBeta") or pipeline[0].get("$vectorSearch")
        limit = search.get("k", search.get("limit"))
        results = copy.deepcopy(self.documents[:limit])
        for stage in pipeline[1:]:
            if "$unset" in stage:
                for doc in results:
                    doc.pop(stage["$unset"], None)
        return FakeCursor(results)


class FakeMongoClient:
    def __init__(self, collection):
        self.collection = collection
        self.closed = False

    def __getitem__(self, name):
        return {"collectionDemo": self.collection, "articles": self.collection}

    async def close(self):
        self.closed = True


@pytest.fixture
def settings():
    return Settings(OPENAI_API_KEY="sk-test", MONGODB_URI="mongodb://localhost:27017")


@pytest.fixture
def stored_documents():
    return [
        {
            "_id": ObjectId(f"65a0000000000000000000{i:02d}"),
            "title": f"Document {i}",
            "embedding": [float(i)] * 4,
        }
        for i in range(7)
    ]


@pytest.fixture
def fake_collection(stored_documents):
    return FakeCollection(stored_documents)


@pytest.fixture
def fake_mongo_client(fake_collection):
    return FakeMongoClient(fake_collection)


@pytest.fixture
def query_vector():
    return list(QUERY_VECTOR)


@pytest.fixture
def failing_mongo_client():
    """Factory: a Mongo client whose aggregation raises ``error``."""

    def make(error):
        return FakeMongoClient(FakeCollection([], error=error))

    return make
