"""Credential value object and the gate that runs before any automation.

The gate is the only place that decides whether an extraction may start. It
never logs the credential values themselves, only which ones are missing.
"""

import logging
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Labels used in diagnostics when the caller does not supply its own
DEFAULT_LABELS: Dict[str, str] = {
    "identity": "identity",
    "secret": "secret",
}


class Credentials(BaseModel):
    """PeopleSoft identity and password for one login attempt."""

    model_config = ConfigDict(frozen=True)

    identity: str = Field(repr=False, description="PeopleSoft ID used as the portal user id")
    secret: SecretStr = Field(description="Portal password")

    def __str__(self) -> str:
        return "Credentials(identity=***, secret=***)"


def require_credentials(
    identity: Optional[str],
    secret: Optional[str],
    labels: Optional[Dict[str, str]] = None
) -> Credentials:
    """Validate both credentials are present and wrap them in a Credentials object.

    Args:
        identity: PeopleSoft ID, possibly None or empty
        secret: Password, possibly None or empty
        labels: Human-facing names for the two values, keyed by 'identity'
            and 'secret' (e.g. the environment variables they came from)

    Returns:
        Immutable Credentials instance

    Raises:
        ConfigurationError: If either value is missing or empty
    """
    names = {**DEFAULT_LABELS, **(labels or {})}

    missing = []
    if not identity:
        missing.append(names["identity"])
    if not secret:
        missing.append(names["secret"])

    for name in missing:
        logger.error(f"Must define {name} in environment or .env file")

    if missing:
        raise ConfigurationError(
            message=f"Missing required credential(s): {', '.join(missing)}",
            missing=missing
        )

    return Credentials(identity=identity, secret=secret)
