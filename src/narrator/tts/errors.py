"""Custom narration exceptions."""


class NarrationError(Exception):
    """Base exception for narration-related errors."""

    def __init__(
        self, message: str, original_error: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_error = original_error


class SegmentationEmptyError(NarrationError):
    """Raised when a document yields no chunks to narrate.

    Non-fatal: the session is simply empty.
    """

    pass


class SynthesisError(NarrationError):
    """Exception raised when speech synthesis fails for a chunk.

    Callers only distinguish success from failure; the subclasses
    exist to give clearer messages.
    """

    pass


class SynthesisAuthError(SynthesisError):
    """Exception raised for authentication failures.

    This typically occurs when:
    - API key is missing or invalid
    - Account has insufficient credits
    - API key permissions are insufficient
    """

    pass


class SynthesisAPIError(SynthesisError):
    """Exception raised for API communication errors.

    This typically occurs when:
    - API server is unavailable (5xx errors)
    - Rate limits are exceeded (429 error)
    - Request format is invalid (4xx errors)
    - The response carries no audio payload
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.status_code = status_code


class DecodeError(NarrationError):
    """Exception raised when synthesized audio cannot be decoded."""

    pass


class OutputError(NarrationError):
    """Exception raised when the platform audio output fails."""

    pass
