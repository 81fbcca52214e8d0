"""
Members Portal entrypoint.

Run with:
  python -m app
"""
import logging

import uvicorn
from dotenv import load_dotenv

logger = logging.getLogger("app")


def main() -> None:
    load_dotenv()

    from app.config import load_config
    from app.main import create_app

    config = load_config()
    app = create_app(config)
    logger.info(f"Server is running on http://localhost:{config.port}")
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
