"""Run the API under uvicorn: python -m calcshare"""

import uvicorn

from calcshare.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "calcshare.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
