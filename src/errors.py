"""
Error taxonomy for article submission.

Every error carries the HTTP status it maps to and a message that is safe to
show to the client. Internal causes are chained with ``raise ... from`` and
only ever logged.
"""


class ArticleBoardError(Exception):
    """Base class for all submission errors."""

    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ArticleBoardError):
    """Bad title/message length or a malformed multipart body."""

    status_code = 400
    default_message = "Invalid submission"


class UploadTooLarge(ArticleBoardError):
    """Request body or attached file exceeds the configured ceiling."""

    status_code = 400
    default_message = "File too large"


class StorageUnavailable(ArticleBoardError):
    """Directory creation, file write, or index read/write failed."""

    status_code = 500
    default_message = "Internal Server Error"


class UploadWriteFailed(StorageUnavailable):
    """Streaming the upload to disk failed."""

    default_message = "Failed to save file"


class TemplateRenderError(ArticleBoardError):
    """Rendering an HTML template failed."""

    status_code = 500
    default_message = "Internal Server Error"
