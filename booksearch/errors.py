# booksearch/errors.py


class SearchError(Exception):
    """Generic search failure."""


class ConfigurationError(SearchError):
    """Required settings (platform id, password) are missing."""


class QueryTooShortError(SearchError):
    """The search term is shorter than the minimum accepted length."""


class UpstreamError(SearchError):
    """The metasearch endpoint answered with a non-success status."""

    def __init__(self, status_code, message=None):
        self.status_code = status_code
        super().__init__(message or f"Search failed: HTTP {status_code}")
