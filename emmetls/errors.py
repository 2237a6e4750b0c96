"""
Failures of the completion pipeline.

None of these ever leave the completion handler: the dispatcher logs them
and replies with an empty completion list.
"""


class CompletionError(Exception):
    """Base class for expected completion failures."""


class DocumentNotFound(CompletionError):
    """The requested URI is not open in the document store."""

    def __init__(self, uri: str) -> None:
        super().__init__(f"failed to find document {uri}")
        self.uri = uri


class NoAbbreviationAtCursor(CompletionError):
    """No abbreviation token ends at (or contains) the cursor."""

    def __init__(self, reason: str = "no abbreviation at cursor") -> None:
        super().__init__(reason)
        self.reason = reason


class ExpansionEngineFailure(CompletionError):
    """The expansion engine rejected the abbreviation."""

    def __init__(self, abbreviation: str, cause: Exception) -> None:
        super().__init__(
            f"failed to expand {abbreviation!r}: {type(cause).__name__}: {cause}"
        )
        self.abbreviation = abbreviation
        self.cause = cause
