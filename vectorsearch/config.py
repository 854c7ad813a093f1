"""
Runtime settings for the vector search relay.

Values come from the process environment (and a ``.env`` file, loaded by
``from_env``). The OpenAI key and the MongoDB connection string have no
default: startup fails with ``ConfigurationError`` when either is absent.

``ServerSettings`` holds what the CLI needs before the app starts (bind
address, log level); ``Settings`` adds the upstream configuration.
"""

import os
from typing import Literal, Mapping

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from vectorsearch.errors import ConfigurationError

REQUIRED_SECRETS = ("OPENAI_API_KEY", "MONGODB_URI")

DEFAULT_EMBEDDINGS_URL = "https://api.openai.com/v1/embeddings"
DEFAULT_EMBEDDING_MODEL = "text-embedding-ada-002"


def _environ(environ: Mapping[str, str] | None) -> Mapping[str, str]:
    if environ is None:
        load_dotenv()
        return os.environ
    return environ


class ServerSettings(BaseModel):
    HOST: str = "0.0.0.0"
    PORT: int = Field(default=8000, gt=0, lt=65536)
    LOG_LEVEL: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None):
        """
        Build settings from environment variables.

        When ``environ`` is omitted, ``.env`` is loaded first and
        ``os.environ`` is used. Empty strings count as unset.
        """
        environ = _environ(environ)
        values = {
            name: environ[name]
            for name in cls.model_fields
            if environ.get(name) not in (None, "")
        }
        if "LOG_LEVEL" in values:
            values["LOG_LEVEL"] = values["LOG_LEVEL"].upper()
        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}") from exc


class Settings(ServerSettings):
    OPENAI_API_KEY: str
    MONGODB_URI: str

    EMBEDDINGS_URL: str = DEFAULT_EMBEDDINGS_URL
    EMBEDDING_MODEL: str = DEFAULT_EMBEDDING_MODEL

    MONGODB_DATABASE: str = "databaseDemo"
    MONGODB_COLLECTION: str = "collectionDemo"
    VECTOR_INDEX_NAME: str = "vectorIndex"
    VECTOR_FIELD: str = "embedding"
    SEARCH_K: int = Field(default=5, gt=0)
    SEARCH_STAGE: Literal["knnBeta", "vectorSearch"] = "knnBeta"
    STRIP_EMBEDDING: bool = True

    REQUEST_TIMEOUT: float = Field(default=30.0, gt=0)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        environ = _environ(environ)
        missing = [name for name in REQUIRED_SECRETS if not environ.get(name)]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variable(s): {', '.join(missing)}"
            )
        return super().from_env(environ)
