"""
Entry point for the photogallery API server.

``app`` is the ASGI application; ``run`` serves it with uvicorn.
"""

import uvicorn

from .api import create_app
from .config import get_server_host, get_server_port, load_env_file
from .logging_config import configure_structured_logging, get_logger

load_env_file()
configure_structured_logging()
logger = get_logger(__name__)

app = create_app()


def run() -> None:
    """Serve the API with uvicorn."""
    host = get_server_host()
    port = get_server_port()
    logger.info("server_starting", host=host, port=port)
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    run()
