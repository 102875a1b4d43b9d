"""
Web server for the article board.
Serves the submission form with the article listing, accepts new articles,
and serves the rendered pages and uploads as static files.
"""
import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from src.article_store import ArticleStore
from src.article_store_factory import create_article_store
from src.body_limit import RequestBodyLimitMiddleware
from src.config import Config
from src.errors import ArticleBoardError, ValidationError
from src.id_allocator import IdAllocator
from src.page_renderer import PageRenderer
from src.submission import SubmissionPipeline
from src.upload_handler import UploadHandler
from src.validator import SubmissionValidator

# Configure server logger
logger = logging.getLogger('article_server')
logger.setLevel(logging.INFO)

# Add console handler if not already present
if not logger.handlers:
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)


def sanitize_log_input(value: str) -> str:
    """
    Sanitize user input for logging to prevent log injection attacks.
    Removes newlines and other control characters that could be used for log forging.

    Args:
        value: The user input to sanitize

    Returns:
        Sanitized string safe for logging
    """
    if not isinstance(value, str):
        value = str(value)
    # Replace newlines, carriage returns, and other control characters
    sanitized = value.replace('\n', '_').replace('\r', '_').replace('\t', '_')
    # Truncate to reasonable length to prevent log flooding
    return sanitized[:200]


def _form_text(form, key: str) -> str:
    """Read a text field from a parsed form; file parts or missing fields read as empty."""
    value = form.get(key)
    if isinstance(value, str):
        return value
    return ""


def create_article_app(config: Config = None, store: ArticleStore = None) -> FastAPI:
    """
    Create the article board FastAPI application.

    The store is loaded before the app is returned and the id allocator
    resumes above the highest stored id.

    Args:
        config: Config instance (optional, defaults to environment-backed Config)
        store: ArticleStore instance (optional, defaults to factory-created)

    Returns:
        FastAPI application instance

    Raises:
        StorageUnavailable: if the persisted article index cannot be read
    """
    if config is None:
        config = Config()
    if store is None:
        store = create_article_store(data_dir=config.data_dir, storage_type=config.storage_type)

    articles = store.load()
    allocator = IdAllocator()
    allocator.resume_after(article.id for article in articles)
    logger.info("Article store ready with %d articles, next id %d", len(articles), allocator.peek())

    articles_dir = config.articles_dir
    os.makedirs(articles_dir, exist_ok=True)
    max_upload_bytes = config.max_upload_bytes

    renderer = PageRenderer(
        max_title_bytes=config.max_title_bytes,
        max_upload_bytes=max_upload_bytes,
    )
    pipeline = SubmissionPipeline(
        store=store,
        allocator=allocator,
        articles_dir=articles_dir,
        validator=SubmissionValidator(
            max_title_bytes=config.max_title_bytes,
            max_message_bytes=config.max_message_bytes,
        ),
        upload_handler=UploadHandler(max_file_bytes=max_upload_bytes),
        renderer=renderer,
    )

    app = FastAPI()  # pylint: disable=redefined-outer-name
    app.state.store = store
    app.state.allocator = allocator
    app.state.pipeline = pipeline

    # ================== ERROR HANDLING ==================
    @app.exception_handler(ArticleBoardError)
    async def article_error_handler(request: Request, exc: ArticleBoardError):
        """Turn submission errors into plain-text responses."""
        if exc.status_code >= 500:
            logger.error(
                "%s %s - %d %s (cause: %r)",
                request.method, request.url.path, exc.status_code, exc.message, exc.__cause__
            )
        else:
            logger.warning(
                "%s %s - %d %s",
                request.method, request.url.path, exc.status_code, sanitize_log_input(exc.message)
            )
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    app.add_middleware(RequestBodyLimitMiddleware, max_body_bytes=max_upload_bytes)

    # ================== PAGES ==================
    @app.get("/", response_class=HTMLResponse)
    async def show_form():
        """Submission form with the current article listing."""
        logger.info("GET /")
        return HTMLResponse(renderer.render_form(store.list()))

    @app.post("/upload")
    @app.post("/submit")
    async def submit_article(request: Request):
        """Accept a multipart submission and redirect to the new article."""
        path = request.url.path
        logger.info(f"POST {path}")
        try:
            form = await request.form(max_part_size=max_upload_bytes)
        except (MultiPartException, StarletteHTTPException) as e:
            raise ValidationError("Failed to parse form") from e

        try:
            title = _form_text(form, "title")
            message = _form_text(form, "message")
            upload = form.get("file")
            if not isinstance(upload, UploadFile):
                upload = None

            article = await run_in_threadpool(pipeline.submit, title, message, upload)
        finally:
            await form.close()

        logger.info(f"POST {path} - 303 Created article {article.id}: {sanitize_log_input(article.title)}")
        return RedirectResponse(url=article.path, status_code=303)

    # ================== API ==================
    @app.get("/api/articles")
    async def list_articles():
        """Current listing as JSON, most-recent-first."""
        logger.info("GET /api/articles")
        return {"articles": [article.to_dict() for article in store.list()]}

    @app.get("/health")
    async def health():
        """Liveness check."""
        return {"status": "ok", "articles": len(store)}

    # ================== STATIC PAGES ==================
    app.mount("/articles", StaticFiles(directory=articles_dir, html=True), name="articles")

    return app
