"""Runtime configuration read from environment variables."""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from packflow.domain.entities import PaymentStatus
from packflow.domain.errors import ConfigurationError
from packflow.domain.revenue import DEFAULT_MAX_BUCKETS, realized_predicate

logger = logging.getLogger(__name__)

DEFAULT_SMS_SENDER = "PackFlow"
DEFAULT_REALIZED_STATUSES = ("accepted", "paid")


def _parse_statuses(value: Optional[str]) -> tuple[str, ...]:
    if not value or not value.strip():
        return DEFAULT_REALIZED_STATUSES
    statuses = tuple(s.strip().lower() for s in value.split(",") if s.strip())
    valid = {status.value for status in PaymentStatus}
    unknown = [s for s in statuses if s not in valid]
    if unknown:
        raise ConfigurationError(
            f"PACKFLOW_REALIZED_STATUSES has unknown status(es): {', '.join(unknown)}"
        )
    return statuses


def _parse_positive_int(name: str, value: Optional[str], default: int) -> int:
    if not value:
        return default
    try:
        parsed = int(value)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r, using %d", name, value, default)
        return default
    if parsed <= 0:
        logger.warning("Ignoring non-positive %s=%r, using %d", name, value, default)
        return default
    return parsed


@dataclass(frozen=True)
class Settings:
    """PackFlow settings.

    The database path and acting user are CLI options (see packflow.cli.main).

    Environment variables:
        SMSWORKS_JWT: The SMS Works API token
        SMSWORKS_SENDER: SMS sender name (default "PackFlow")
        PACKFLOW_REALIZED_STATUSES: Comma-separated statuses counted as revenue
            (default "accepted,paid")
        PACKFLOW_MAX_BUCKETS: Upper bound on revenue series length (default 5000)
    """

    smsworks_jwt: Optional[str] = None
    smsworks_sender: str = DEFAULT_SMS_SENDER
    realized_statuses: tuple[str, ...] = DEFAULT_REALIZED_STATUSES
    max_buckets: int = DEFAULT_MAX_BUCKETS

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from the environment.

        Raises:
            ConfigurationError: If PACKFLOW_REALIZED_STATUSES names an unknown status
        """
        env = os.environ if environ is None else environ
        return cls(
            smsworks_jwt=env.get("SMSWORKS_JWT") or None,
            smsworks_sender=env.get("SMSWORKS_SENDER") or DEFAULT_SMS_SENDER,
            realized_statuses=_parse_statuses(env.get("PACKFLOW_REALIZED_STATUSES")),
            max_buckets=_parse_positive_int(
                "PACKFLOW_MAX_BUCKETS", env.get("PACKFLOW_MAX_BUCKETS"), DEFAULT_MAX_BUCKETS
            ),
        )

    def realized_predicate(self):
        """Predicate for payments counted as realized revenue."""
        return realized_predicate(self.realized_statuses)
