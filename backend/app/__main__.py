"""
Run the API with `python -m app`.
"""

import uvicorn

from app.core.config import get_settings
from app.main import app


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        app,
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_config=None,  # structlog
        reload=False,
        access_log=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
