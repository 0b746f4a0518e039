"""Custom exception hierarchy for docingest pipeline operations."""


class DocIngestError(Exception):
    """Base exception for all docingest errors.

    All docingest-specific exceptions inherit from this class, enabling
    centralized exception handling at the document boundary.
    """

    pass


class ConfigError(DocIngestError):
    """Exception raised for configuration errors.

    This exception is raised when configuration loading or parsing fails.
    It includes field-specific information to help users identify and fix
    configuration issues.

    Attributes:
        field: The configuration field that caused the error
        message: Human-readable error message describing the issue
    """

    def __init__(self, field: str, message: str) -> None:
        """Initialize ConfigError with field and message.

        Args:
            field: Configuration field name where error occurred
            message: Descriptive error message
        """
        self.field = field
        self.message = message
        super().__init__(f"Configuration error in '{field}': {message}")


class ValidationError(DocIngestError):
    """Exception raised for malformed or missing pipeline input.

    Fatal for the document being processed. Provides detailed information
    about what was expected versus what was received.

    Attributes:
        field: The field that failed validation
        message: Description of the validation failure
        expected: Human description of expected value/type
        actual: The actual value that failed validation
    """

    def __init__(
        self,
        field: str,
        message: str,
        expected: str,
        actual: str,
    ) -> None:
        """Initialize ValidationError with detailed information.

        Args:
            field: Field that failed validation (can use dot notation for nested fields)
            message: Description of what went wrong
            expected: Human-readable description of expected value
            actual: The actual value that failed
        """
        self.field = field
        self.message = message
        self.expected = expected
        self.actual = actual
        full_message = (
            f"Validation error in '{field}': {message}\n"
            f"  Expected: {expected}\n"
            f"  Got: {actual}"
        )
        super().__init__(full_message)


class StructureError(DocIngestError):
    """Exception raised when a document yields an empty or degenerate structure."""

    def __init__(self, message: str) -> None:
        """Create a structure error."""
        self.message = message
        super().__init__(message)


class ExtractionFailure(DocIngestError):
    """A single enrichment call failed for one chunk.

    Never propagated out of the enrichment coordinator: it is logged and the
    call's default value is used instead.

    Attributes:
        operation: Name of the enrichment operation (e.g. "keyphrases")
        chunk_file: Chunk file name the call was made for
        cause: The underlying exception
    """

    def __init__(self, operation: str, chunk_file: str, cause: Exception) -> None:
        """Initialize ExtractionFailure with operation, chunk and cause."""
        self.operation = operation
        self.chunk_file = chunk_file
        self.cause = cause
        super().__init__(
            f"Enrichment operation '{operation}' failed for {chunk_file}: {cause}"
        )


class UpstreamServiceError(DocIngestError):
    """Error raised when a backend service (analysis, storage, search) fails.

    Propagated to the caller, which is expected to retry the whole document.

    Attributes:
        service: Name of the failing collaborator
        message: Human-readable error message
        original_error: The underlying exception, if any
    """

    def __init__(
        self,
        service: str,
        message: str,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize UpstreamServiceError with service and optional cause.

        Args:
            service: Collaborator name (e.g. "analyzer", "blob_store")
            message: Descriptive error message
            original_error: The underlying exception that caused the failure
        """
        self.service = service
        self.message = message
        self.original_error = original_error
        full_message = f"{service} failed: {message}"
        if original_error:
            full_message += f"\nOriginal error: {original_error}"
        super().__init__(full_message)
