"""Development server — `python -m crudframe`.

Single process, no reloader; production runs the same app under its own
uvicorn/gunicorn command line.
"""

import uvicorn

from crudframe.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "crudframe.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
