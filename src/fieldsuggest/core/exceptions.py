"""Custom exceptions for fieldsuggest."""


class FieldSuggestError(Exception):
    """Base exception for all fieldsuggest errors."""


class ConfigError(FieldSuggestError):
    """Configuration error."""


class TemplateError(FieldSuggestError, ValueError):
    """Endpoint template does not hold exactly one query placeholder."""


class CacheError(FieldSuggestError):
    """Endpoint cache misuse (double reservation, store without reservation)."""


class FetchError(FieldSuggestError):
    """Network, HTTP status or decoding failure while fetching suggestions."""

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url
