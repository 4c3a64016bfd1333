"""Run the backend with uvicorn."""

from __future__ import annotations
import os
import uvicorn


def main() -> None:
    """Serve the application on ``AUTHRESS_HOST``:``AUTHRESS_PORT``."""
    uvicorn.run(
        "authress_sso_login_backend.app:app",
        host=os.getenv("AUTHRESS_HOST", "0.0.0.0"),
        port=int(os.getenv("AUTHRESS_PORT", "8000")),
    )


if __name__ == "__main__":
    main()
