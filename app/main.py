"""
API server entry point.

Run with:
    python -m app.main
"""

import uvicorn

from expense_tracker.api import create_app
from expense_tracker.config import get_settings


app = create_app()


if __name__ == "__main__":
    settings = get_settings().app
    uvicorn.run(app, host=settings.host, port=settings.port)
