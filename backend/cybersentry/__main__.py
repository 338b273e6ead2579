# Name: __main__.py
# Description: Run the API with uvicorn (python -m cybersentry)
# Date: 2026-10-12

import uvicorn

from cybersentry.main import app
from cybersentry.core.config import settings


def main() -> None:
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
