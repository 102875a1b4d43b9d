"""
HTML rendering for article pages and the submission form.

Templates live in ``src/templates`` and are rendered with autoescaping, so
user-provided titles and messages are always escaped.
"""
import logging
import os
from typing import List

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from src.article import Article, MediaKind
from src.config import DEFAULT_MAX_TITLE_BYTES, DEFAULT_MAX_UPLOAD_BYTES
from src.errors import TemplateRenderError
from src.upload_handler import STORED_UPLOAD_NAME

logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")


class PageRenderer:
    """Renders the static article page and the form/listing page."""

    def __init__(
        self,
        template_dir: str = TEMPLATE_DIR,
        max_title_bytes: int = DEFAULT_MAX_TITLE_BYTES,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
    ):
        """
        Initialize renderer.

        Args:
            template_dir: Directory containing article.html and form.html
            max_title_bytes: Title limit shown in the form
            max_upload_bytes: Upload limit shown in the form
        """
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html"]),
        )
        self.max_title_bytes = max_title_bytes
        self.max_upload_bytes = max_upload_bytes

    def render(self, article: Article, message: str, media_kind: MediaKind) -> bytes:
        """
        Render the standalone page of one article.

        Args:
            article: Article being published
            message: Article body text
            media_kind: Kind of the stored upload, decides the embed tag

        Returns:
            UTF-8 encoded HTML document

        Raises:
            TemplateRenderError: if the template cannot be loaded or rendered
        """
        try:
            template = self.env.get_template("article.html")
            html = template.render(
                article=article,
                message=message,
                media_kind=media_kind.value,
                upload_name=STORED_UPLOAD_NAME,
            )
        except TemplateError as e:
            logger.error("Failed to render article %d: %s", article.id, e)
            raise TemplateRenderError() from e
        return html.encode("utf-8")

    def render_form(self, articles: List[Article]) -> str:
        """
        Render the submission form together with the article listing.

        Raises:
            TemplateRenderError: if the template cannot be loaded or rendered
        """
        try:
            template = self.env.get_template("form.html")
            return template.render(
                articles=articles,
                max_title=self.max_title_bytes,
                max_upload_mb=self.max_upload_bytes >> 20,
            )
        except TemplateError as e:
            logger.error("Failed to render form page: %s", e)
            raise TemplateRenderError() from e
