"""
Error taxonomy for the relay.

Clients raise these; the API layer turns them into JSON error responses
(see ``vectorsearch.api.app``).
"""


class ConfigurationError(Exception):
    """A required setting is missing or invalid. Raised at startup."""


class RelayError(Exception):
    error_code = "relay_error"
    status_code = 502

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.error_code, "detail": self.message}


class TransportError(RelayError):
    """Network-level failure reaching an upstream service."""

    error_code = "upstream_unreachable"

    def __init__(self, message: str, service: str):
        super().__init__(message)
        self.service = service

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["service"] = self.service
        return body


class ProviderError(RelayError):
    """The embedding provider answered with a non-success status or an unreadable body."""

    error_code = "embedding_provider_error"

    def __init__(self, message: str, upstream_status: int):
        super().__init__(message)
        self.upstream_status = upstream_status

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["upstream_status"] = self.upstream_status
        return body


class QueryError(RelayError):
    """The vector search aggregation failed."""

    error_code = "vector_search_failed"
