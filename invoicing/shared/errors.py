"""Exception hierarchy for the invoice service.

Engine and collaborators raise these so the API layer can map them onto
HTTP responses without inspecting library-specific exceptions.
"""


class InvoiceServiceError(Exception):
    """Base class for all invoice service errors."""


class DocumentGenerationError(InvoiceServiceError):
    """Raised when a document cannot be laid out or finalized.

    No partial output accompanies this error.
    """


class EmailDeliveryError(InvoiceServiceError):
    """Raised when an email could not be delivered after all retries."""
