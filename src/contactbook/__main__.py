"""contactbook entrypoint.

Run with:
  python -m contactbook
"""

import os

import uvicorn

from contactbook.config import env_flag


def main() -> None:
    host = os.getenv("CONTACTBOOK_HOST", "0.0.0.0")
    port = int(os.getenv("CONTACTBOOK_PORT", "8000"))
    reload = env_flag("CONTACTBOOK_RELOAD")
    uvicorn.run("contactbook.app:create_app", host=host, port=port, reload=reload, factory=True)


if __name__ == "__main__":
    main()
