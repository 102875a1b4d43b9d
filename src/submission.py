"""
Submission pipeline for the article board.
Turns one validated form submission into a rendered, stored, listed article.
"""
import logging
import os
from typing import Optional

from starlette.datastructures import UploadFile

from src.article import Article, MediaKind
from src.article_store import ArticleStore
from src.errors import StorageUnavailable, ValidationError
from src.id_allocator import IdAllocator
from src.page_renderer import PageRenderer
from src.upload_handler import UploadHandler, classify_media, has_upload
from src.validator import SubmissionValidator

logger = logging.getLogger(__name__)

PAGE_FILENAME = "index.html"


class SubmissionPipeline:
    """
    Runs the steps of one submission in order.

    validate -> allocate id -> create directory -> save upload -> write page
    -> append to store. A failure at any step aborts the remaining ones. The
    id is burned even when a later step fails, and files already written are
    left in place; they are never linked because the store append did not
    happen.
    """

    def __init__(
        self,
        store: ArticleStore,
        allocator: IdAllocator,
        articles_dir: str = "articles",
        validator: SubmissionValidator = None,
        upload_handler: UploadHandler = None,
        renderer: PageRenderer = None,
    ):
        """
        Initialize submission pipeline.

        Args:
            store: ArticleStore receiving finished articles
            allocator: IdAllocator handing out article ids
            articles_dir: Root directory of per-article directories
            validator: SubmissionValidator (optional, defaults to standard limits)
            upload_handler: UploadHandler (optional, defaults to standard limits)
            renderer: PageRenderer (optional, defaults to bundled templates)
        """
        self.store = store
        self.allocator = allocator
        self.articles_dir = articles_dir
        self.validator = validator or SubmissionValidator()
        self.upload_handler = upload_handler or UploadHandler()
        self.renderer = renderer or PageRenderer()

    def article_dir(self, article_id: int) -> str:
        """Directory holding the page and upload of an article."""
        return os.path.join(self.articles_dir, str(article_id))

    def validate(self, title: str, message: str, upload: Optional[UploadFile] = None) -> None:
        """
        Check a submission before any storage is touched.

        Raises:
            ValidationError: if title or message length is out of bounds
            UploadTooLarge: if the upload reports a size above the cap
        """
        is_valid, errors = self.validator.validate_submission(title, message)
        if not is_valid:
            logger.warning("Rejected submission: %s", "; ".join(errors))
            raise ValidationError(errors[0])
        if has_upload(upload):
            self.upload_handler.check_size(upload)

    def submit(self, title: str, message: str, upload: Optional[UploadFile] = None) -> Article:
        """
        Publish one article.

        Args:
            title: Article title
            message: Article body
            upload: Optional attached file

        Returns:
            The stored Article

        Raises:
            ValidationError, UploadTooLarge: client errors, nothing was written
            StorageUnavailable, TemplateRenderError: server errors
        """
        self.validate(title, message, upload)

        article_id = self.allocator.next()
        dir_path = self.article_dir(article_id)
        logger.info("Assigned id %d", article_id)

        try:
            os.makedirs(dir_path, exist_ok=True)
        except OSError as e:
            logger.error("Failed to create directory %s: %s", dir_path, e)
            raise StorageUnavailable() from e

        attachment = None
        media_kind = MediaKind.NONE
        if has_upload(upload):
            attachment = self.upload_handler.save(upload, dir_path)
            media_kind = classify_media(upload.filename) if upload.filename else MediaKind.UNRECOGNIZED
            logger.info("Article %d upload classified as %s", article_id, media_kind.value)

        article = Article(
            id=article_id,
            title=title,
            attachment=attachment,
            media_kind=media_kind,
        )

        page = self.renderer.render(article, message, media_kind)
        page_path = os.path.join(dir_path, PAGE_FILENAME)
        try:
            with open(page_path, "wb") as f:
                f.write(page)
        except OSError as e:
            logger.error("Failed to save article page %s: %s", page_path, e)
            raise StorageUnavailable() from e
        logger.info("Wrote page for article %d", article_id)

        self.store.append(article)
        return article
