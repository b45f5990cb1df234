"""`python -m propcomply` — run the API with uvicorn."""

import uvicorn

from propcomply.core.config import settings


def main() -> None:
    uvicorn.run(
        "propcomply.main:app",
        host="0.0.0.0",
        port=settings.app_port,
        reload=settings.app_env == "development",
    )


if __name__ == "__main__":
    main()
