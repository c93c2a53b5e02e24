"""
ingress_admission.api.__main__

Entrypoint for running the webhook via `python -m ingress_admission.api`.

Responsibilities:
- Load settings.
- Create the app.
- Start uvicorn (TLS when a cert/key pair is configured).
"""

from __future__ import annotations

import uvicorn

from ingress_admission.api.app import create_app
from ingress_admission.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        ssl_certfile=settings.tls_cert_file,
        ssl_keyfile=settings.tls_key_file,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()


# --- Module Notes -----------------------------------------------------------
# The API server only calls webhooks over HTTPS; plain HTTP is for local development.
