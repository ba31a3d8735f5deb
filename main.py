"""
Run the Academy Records API with uvicorn.

    python main.py

Host and port come from ``HOST`` / ``PORT`` (default 0.0.0.0:3000).
"""

import uvicorn

from app.core.config import settings
from app.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
