"""Run the API with uvicorn: ``python -m pos_api``."""

import uvicorn

from shared.config.settings import settings


def main() -> None:
    uvicorn.run(
        "pos_api.main:app",
        host="0.0.0.0",
        port=settings.rest_api_port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
