from docscan.services.exceptions import ClientRequestError


class UnsupportedDocumentError(ClientRequestError):
    """Raised when an OCR adapter cannot handle the document's media type."""
