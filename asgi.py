"""
asgi.py -- ASGI entry point for UserHub.

Run with:  uvicorn asgi:app --reload
           python asgi.py   (binds 0.0.0.0:3000)
"""

import uvicorn

from api.main import app

__all__ = ["app"]


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=3000)  # noqa: S104 # nosec B104 -- container entry point
