"""
ingress_admission.api

HTTP API package (FastAPI).

Responsibilities:
- App factory and composition root.
- Validating webhook and probe routers.
"""

# Package marker.
