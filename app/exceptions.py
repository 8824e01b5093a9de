class DocumentIntakeError(Exception):
    """Base exception for all document intake errors."""


class ConfigurationError(DocumentIntakeError):
    """Raised when credentials or endpoints are missing or invalid."""


class ValidationError(DocumentIntakeError):
    """Raised when a required input (document, question, text) is missing."""


class TransportError(DocumentIntakeError):
    """Raised when a remote call fails at the network or HTTP level."""


class JobTimeoutError(TransportError):
    """Raised when an extraction job does not finish within the poll ceiling."""


class JobFailedError(DocumentIntakeError):
    """Raised when the extraction service reports a failed analysis job."""


class EmptyResponseError(DocumentIntakeError):
    """Raised when the language model returns no text segment."""


class ExtractionError(DocumentIntakeError):
    """Raised when a local extraction library fails on a document."""


class BusyError(DocumentIntakeError):
    """Raised when an operation of the same kind is already in flight."""


class OperationCancelledError(DocumentIntakeError):
    """Raised when an in-flight operation is abandoned."""


class ConfigStoreError(DocumentIntakeError):
    """Raised when session configuration cannot be loaded or saved."""
