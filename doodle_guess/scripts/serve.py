"""
Run the drawing game (page + API) on HOST:PORT.

Usage:
    python -m doodle_guess.scripts.serve
"""
import logging

import uvicorn

from doodle_guess.config.settings import load_settings
from doodle_guess.services.api import create_app
from doodle_guess.web.app import create_web_app


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    settings = load_settings()
    app = create_web_app(create_app(settings))
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
