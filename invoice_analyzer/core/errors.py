"""
Error taxonomy for the invoice analyzer.

Every error raised along the upload and read paths derives from
InvoiceAnalyzerError and carries the HTTP status it should surface as.
The API layer renders them as {"success": false, "message": ...}.
"""


class InvoiceAnalyzerError(Exception):
    """Base class for errors that are reported to the HTTP caller"""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ExtractionError(InvoiceAnalyzerError):
    """The uploaded file could not be read or its PDF text could not be extracted"""


class AIServiceError(InvoiceAnalyzerError):
    """The generative model was unreachable, refused the request, or returned nothing"""


class MalformedResponseError(InvoiceAnalyzerError):
    """The model's reply did not contain a parseable JSON object"""


class StoreError(InvoiceAnalyzerError):
    """The invoice store could not complete the operation"""


class NotFound(InvoiceAnalyzerError):
    """No invoice matches the given identifier"""

    status_code = 404

    def __init__(self, message: str = "Invoice not found"):
        super().__init__(message)


class UploadRejected(InvoiceAnalyzerError):
    """The upload was missing, too large, or not an allowed file type"""

    status_code = 400
