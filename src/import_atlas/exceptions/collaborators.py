"""Errors raised by downstream collaborators (summarizer, renderer)."""

from .base import ImportAtlasError


class CollaboratorError(ImportAtlasError):
    """Base class for failures inside a downstream collaborator."""

    pass


class SummarizerError(CollaboratorError):
    """Raised when a summarizer fails or returns no text."""

    def __init__(self, summarizer: str, reason: str):
        super().__init__(
            f"Summarizer {summarizer} failed",
            details={"summarizer": summarizer, "reason": reason},
        )
        self.summarizer = summarizer
        self.reason = reason
