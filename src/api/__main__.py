"""Run the API server: python -m src.api"""

import uvicorn

from src.api.dependencies import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "src.api.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.server.reload,
        log_level=(settings.telemetry.log_level or settings.app.log_level).lower(),
    )


if __name__ == "__main__":
    main()
