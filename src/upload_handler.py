"""
Storage of the optional file attached to an article.

The caller-supplied filename is only used to classify the media type. Content
is always written to the fixed name ``upload`` inside the article's own
directory.
"""
import logging
import os
import tempfile
from typing import Optional

from starlette.datastructures import UploadFile

from src.article import MediaKind
from src.config import DEFAULT_MAX_UPLOAD_BYTES
from src.errors import UploadTooLarge, UploadWriteFailed

logger = logging.getLogger(__name__)

STORED_UPLOAD_NAME = "upload"
CHUNK_SIZE = 1 << 20

# Matched case-sensitively: "photo.PNG" is unrecognized
MEDIA_EXTENSIONS = {
    ".jpg": MediaKind.IMAGE,
    ".jpeg": MediaKind.IMAGE,
    ".png": MediaKind.IMAGE,
    ".gif": MediaKind.IMAGE,
    ".mp4": MediaKind.VIDEO,
    ".mp3": MediaKind.AUDIO,
}


def classify_media(filename: Optional[str]) -> MediaKind:
    """
    Classify an upload by the extension of its original filename.

    Args:
        filename: Filename as sent by the client, or None

    Returns:
        MediaKind.NONE without a filename, otherwise the kind mapped from the
        extension or MediaKind.UNRECOGNIZED
    """
    if not filename:
        return MediaKind.NONE
    # Only the last path component counts, whatever separator the client used
    basename = filename.replace("\\", "/").rsplit("/", 1)[-1]
    # Everything from the last dot, so ".png" alone is a png
    dot = basename.rfind(".")
    ext = basename[dot:] if dot >= 0 else ""
    return MEDIA_EXTENSIONS.get(ext, MediaKind.UNRECOGNIZED)


def has_upload(upload: Optional[UploadFile]) -> bool:
    """True when the form carried an actual file rather than an empty file input."""
    if upload is None:
        return False
    if upload.filename:
        return True
    return bool(upload.size)


class UploadHandler:
    """Streams uploads into per-article directories."""

    def __init__(self, max_file_bytes: int = DEFAULT_MAX_UPLOAD_BYTES):
        """
        Initialize upload handler.

        Args:
            max_file_bytes: Largest accepted file in bytes
        """
        self.max_file_bytes = max_file_bytes

    def check_size(self, upload: UploadFile) -> None:
        """
        Reject an upload whose reported size already exceeds the cap.

        Raises:
            UploadTooLarge: if the size is known and too large
        """
        if upload.size is not None and upload.size > self.max_file_bytes:
            logger.warning("Rejected upload of %d bytes (max %d)", upload.size, self.max_file_bytes)
            raise UploadTooLarge(self._too_large_message())

    def save(self, upload: UploadFile, destination_dir: str) -> str:
        """
        Stream an upload to ``destination_dir/upload``.

        Bytes go to a hidden, randomly named ``.part`` file first and are
        moved into place only once the whole upload fits under the cap, so a
        rejected upload never leaves a file behind and an unfinished one is
        never reachable under a predictable URL.

        Args:
            upload: Uploaded file from the multipart form
            destination_dir: Existing directory of the article

        Returns:
            The stored filename

        Raises:
            UploadTooLarge: if the upload exceeds the cap
            UploadWriteFailed: if writing to disk fails
        """
        self.check_size(upload)

        final_path = os.path.join(destination_dir, STORED_UPLOAD_NAME)
        written = 0
        part_path = None
        try:
            fd, part_path = tempfile.mkstemp(dir=destination_dir, prefix=".upload-", suffix=".part")
            with os.fdopen(fd, "wb") as dst:
                while True:
                    chunk = upload.file.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_file_bytes:
                        raise UploadTooLarge(self._too_large_message())
                    dst.write(chunk)
            os.replace(part_path, final_path)
        except UploadTooLarge:
            self._discard(part_path)
            logger.warning("Rejected upload after %d bytes (max %d)", written, self.max_file_bytes)
            raise
        except OSError as e:
            self._discard(part_path)
            logger.error("Failed to save upload to %s: %s", destination_dir, e)
            raise UploadWriteFailed() from e

        logger.info("Saved upload (%d bytes) to %s", written, final_path)
        return STORED_UPLOAD_NAME

    def _too_large_message(self) -> str:
        return f"File too large. Max size is {self.max_file_bytes >> 20}MB"

    @staticmethod
    def _discard(path: Optional[str]) -> None:
        if path is None:
            return
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error("Failed to remove partial upload %s: %s", path, e)
