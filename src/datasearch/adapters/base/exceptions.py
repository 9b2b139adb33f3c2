"""Search engine exceptions."""


class SearchEngineError(Exception):
    """Base exception for search engine errors."""


class ConfigurationError(SearchEngineError):
    """Raised when a query, item or engine is configured inconsistently."""


class EngineUnavailableError(SearchEngineError):
    """Raised when the search engine cannot be reached or the request fails in transport."""


class MalformedResponseError(SearchEngineError):
    """Raised when an engine response lacks the expected structure."""


class DocumentNotFoundError(SearchEngineError):
    """Raised when a requested document does not exist."""


class OperationNotSupportedError(SearchEngineError, NotImplementedError):
    """Raised by operations the backend does not implement."""
