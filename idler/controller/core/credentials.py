import logging
import os

from ..config import IdlerConfig
from ..models import Credentials

logger = logging.getLogger("idler.credentials")


def read_secret(path: str) -> str:
    """Return the stripped content of a secret file, or "" if it does not exist."""
    if not os.path.exists(path):
        return ""
    with open(path, "r", encoding="utf-8") as f:
        return f.read().strip()


def load_credentials(config: IdlerConfig) -> Credentials:
    """
    Read the gateway basic auth pair from the mounted secrets.

    Missing or unreadable secrets are logged, and the controller continues with
    empty values.
    """
    values = {}
    for field, path in (
        ("username", config.BASIC_AUTH_USER_FILE),
        ("password", config.BASIC_AUTH_PASSWORD_FILE),
    ):
        try:
            values[field] = read_secret(path)
        except OSError as e:
            logger.warning(f"Unable to read {field}: {e}")
            values[field] = ""
            continue
        if not values[field]:
            logger.warning(f"Unable to read {field}: {path} not found or empty")

    return Credentials(**values)
