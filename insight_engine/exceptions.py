"""Exceptions raised across the analysis pipeline."""
from typing import Optional


class InsightEngineError(Exception):
    """Base exception for all pipeline errors."""
    pass


class ExtractionError(InsightEngineError):
    """Raised when a document cannot be turned into text. Aborts the run."""
    pass


class FetchError(InsightEngineError):
    """Raised when a source URL cannot be fetched."""

    def __init__(self, message: str, url: str):
        """
        Initialize fetch error.

        Args:
            message: Error message
            url: URL that failed
        """
        super().__init__(message)
        self.url = url


class ModelError(InsightEngineError):
    """Raised when the text-generation model call fails (network, timeout, quota)."""
    pass


class InvalidModelOutput(InsightEngineError):
    """Raised when a model reply does not match the expected JSON contract."""

    def __init__(self, message: str, raw: Optional[str] = None):
        """
        Initialize invalid output error.

        Args:
            message: Error message
            raw: Raw model reply that failed validation
        """
        super().__init__(message)
        self.raw = raw


class UnsupportedTickerError(InsightEngineError):
    """Raised when a ticker has no registered source URLs."""

    def __init__(self, ticker: str):
        super().__init__(f"Unsupported ticker: {ticker}")
        self.ticker = ticker
