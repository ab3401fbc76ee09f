"""
Error types raised by feedqa.
"""
from typing import Optional


class FeedQAError(Exception):
    """Base class for every error feedqa surfaces to its callers."""


class InvalidUrl(FeedQAError):
    """Raised when a feed URL is not an absolute URL."""


class FetchFailed(FeedQAError):
    """
    Raised when a feed could be fetched neither directly nor through the proxy.

    The message carries the proxy attempt's error. The direct attempt's error
    is kept on ``direct_error`` for callers that want to report both.
    """
    def __init__(self, message: str, direct_error: Optional[BaseException] = None):
        super().__init__(message)
        self.direct_error = direct_error


class MalformedXml(FeedQAError):
    """Raised when feed markup is not well-formed XML."""


class InvalidFeedFormat(FeedQAError):
    """Raised when well-formed XML is neither an RSS channel nor an Atom feed."""


class NotReady(FeedQAError):
    """Raised when a question is asked before the model has finished loading."""


class ModelLoadError(FeedQAError):
    """Base class for model initialization failures."""


class NetworkFailure(ModelLoadError):
    """The model could not be downloaded."""


class UnsupportedRuntime(ModelLoadError):
    """The tensor runtime or accelerator the model needs is unavailable."""


class InitializationFailure(ModelLoadError):
    """Any other model initialization failure."""


class QueryFailed(FeedQAError):
    """Raised when the model fails while answering a question."""
