"""
ingress_admission.observability.logging

Structured logging configuration for the webhook.

Responsibilities:
- Configure `structlog` for JSON logs, one line per admission event.
- Stamp every admission decision event with a uniform `outcome` field.
- Provide a small wrapper for obtaining bound loggers.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

# Decision events emitted by the gate and the webhook, and the outcome each one implies.
DECISION_OUTCOMES: dict[str, str] = {
    "hostname_change_preapproved": "accepted",
    "hostname_change_authorized": "accepted",
    "hostname_change_rejected": "rejected",
    "authorizer_failed": "rejected",
}


def configure_logging(*, service_name: str, env: str, level: str) -> None:
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_deployment(service_name=service_name, env=env),
            add_admission_outcome,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _add_deployment(*, service_name: str, env: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        event_dict.setdefault("env", env)
        return event_dict

    return processor


def add_admission_outcome(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Adds `outcome=accepted|rejected` so log queries need not know every event name.

    `admission_reviewed` carries the final webhook answer in its `allowed` field.
    """
    event = event_dict.get("event")
    if event == "admission_reviewed" and "allowed" in event_dict:
        outcome: str | None = "accepted" if event_dict["allowed"] else "rejected"
    else:
        outcome = DECISION_OUTCOMES.get(str(event))
    if outcome is not None:
        event_dict.setdefault("outcome", outcome)
    return event_dict


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
