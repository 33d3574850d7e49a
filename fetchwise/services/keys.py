"""
Request identity keys shared by the pending-request registry and the response cache.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fetchwise.services.config import RequestConfig


def default_key(config: "RequestConfig") -> str:
    """Lower-cased method followed by the url, e.g. ``get/users``."""
    return f"{config.method.lower()}{config.url}"


def derive_key(config: "RequestConfig") -> str:
    """
    Derive the identity key for a request.

    Uses ``config.duplicated_key`` when supplied and it returns a
    non-empty string, otherwise falls back to :func:`default_key`.
    """
    if config.duplicated_key is not None:
        key = config.duplicated_key(config)
        if key:
            return key
    return default_key(config)
