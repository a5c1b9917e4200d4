"""Run the API with uvicorn: `python -m font_converter`."""

import uvicorn

from font_converter.config import settings


def main() -> None:
    uvicorn.run(
        "font_converter.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
