"""
ingress_admission.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for the webhook and the gate.
- Hide secrets from repr/logging (e.g., the authorizer bearer token).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Deployment pattern:
    - Strict env-driven configuration (ConfigMap/Secret friendly)
    - Defaults fail closed: no hostname change is pre-approved
    - Single settings object injected across layers
    """

    model_config = SettingsConfigDict(env_prefix="INGRESS_ADMISSION_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "ingress-admission"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8443
    tls_cert_file: str | None = None
    tls_key_file: str | None = None

    # Admission policy. None means the plugin is unconfigured and runs with the strictest policy.
    allow_hostname_changes: bool | None = None

    # Authorizer selection
    authorizer: Literal["deny", "groups", "subjectaccessreview"] = "deny"
    privileged_groups: list[str] = Field(default_factory=lambda: ["system:masters"])
    authorizer_url: str = "https://kubernetes.default.svc"
    authorizer_token: str | None = Field(default=None, repr=False)
    authorizer_ca_file: str | None = None
    authorizer_timeout_seconds: float = 5.0


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Changing policy requires a restart: the gate is built once from these settings at startup.
