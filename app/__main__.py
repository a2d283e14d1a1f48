"""Run the API server: python -m app"""

import uvicorn

from app.core.settings import settings


def main() -> None:
    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
