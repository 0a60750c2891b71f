"""Run the server: python -m minipost"""

import uvicorn

from minipost.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "minipost.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
