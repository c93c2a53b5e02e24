"""
ingress_admission.admission.config

Static admission policy.

Responsibilities:
- Define `AdmissionConfig` (single `allowHostnameChanges` switch).
- Derive it from service settings, keeping "unconfigured" distinct from "false".
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ingress_admission.settings import Settings


class AdmissionConfig(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    allow_hostname_changes: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "allow_hostname_changes", "allowHostnameChanges", "AllowHostnameChanges"
        ),
        serialization_alias="allowHostnameChanges",
    )


def admission_config_from_settings(settings: Settings) -> AdmissionConfig | None:
    # None is the unconfigured plugin: the gate treats it as the strictest policy.
    if settings.allow_hostname_changes is None:
        return None
    return AdmissionConfig(allow_hostname_changes=settings.allow_hostname_changes)
