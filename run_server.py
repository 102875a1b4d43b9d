#!/usr/bin/env python
"""
Run the article board web server.
"""
import uvicorn
from article_server import create_article_app
from src.config import Config


def main():
    """Run the article board server."""
    # Load configuration
    config = Config()

    # Load the article index and build the app
    app = create_article_app(config=config)

    print("Starting article board server...")
    print(f"Pages stored under: {config.articles_dir}")
    print(f"Listening on http://{config.server_host}:{config.server_port}")

    # Run uvicorn server
    uvicorn.run(
        app,
        host=config.server_host,
        port=config.server_port,
        log_level="info"
    )


if __name__ == "__main__":
    main()
