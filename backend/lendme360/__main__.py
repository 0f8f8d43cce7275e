import logging

import uvicorn

from .api.app import create_app
from .config import settings


def main():
    """
    Application entry point.
    """
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    app = create_app(settings)

    # Start serving
    uvicorn.run(app, host=settings.server.host, port=settings.server.port, log_config=None)


if __name__ == "__main__":
    main()
