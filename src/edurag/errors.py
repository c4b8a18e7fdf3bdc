"""Exception taxonomy shared by every layer."""

from __future__ import annotations


class EduRagError(Exception):
    """Base class for all edurag errors."""


class InvalidArgumentError(EduRagError, ValueError):
    """Bad parameters, e.g. chunk overlap not smaller than the chunk size."""


class EmptyInputError(EduRagError, ValueError):
    """Nothing left to work with after cleaning the input text."""


class DimensionMismatchError(EduRagError, ValueError):
    """An embedding's dimensionality does not match the index it is written to."""


class RateLimitedError(EduRagError):
    """A provider rejected the request with HTTP 429."""


class EmbeddingUnavailableError(EduRagError):
    """Both the primary and the secondary embedding provider failed."""

    def __init__(self, primary_error: str, secondary_error: str):
        self.primary_error = primary_error
        self.secondary_error = secondary_error
        super().__init__(
            "Failed to generate embedding with both providers "
            f"(primary: {primary_error}; secondary: {secondary_error})"
        )


class IndexUnavailableError(EduRagError):
    """The vector index call itself failed."""


class MalformedResponseError(EduRagError):
    """A language-model response could not be parsed into the expected structure."""


class QualityEvaluationFailed(EduRagError):
    """The rubric evaluation could not be obtained or parsed."""


class ClaimExtractionFailed(EduRagError):
    """Claims could not be extracted from generated content."""


class ClaimVerificationFailed(EduRagError):
    """A single claim could not be verified against the sources."""
