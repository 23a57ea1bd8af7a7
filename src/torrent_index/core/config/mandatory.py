"""
Options the user must supply explicitly.

A compiled-in default is never an acceptable source for these: the check
runs against the provider built from the user's document and environment
overrides only, before defaults are joined in.  Changing the document
schema means updating this list in lock-step.
"""

from __future__ import annotations

from torrent_index.core.logging import get_logger

from .errors import MissingMandatoryOption
from .layers import LayeredProvider

logger = get_logger(__name__)

MANDATORY_OPTIONS: tuple[str, ...] = (
    "auth.user_claim_token_pepper",
    "logging.threshold",
    "metadata.schema_version",
    "tracker.token",
)


def check_mandatory_options(
    provider: LayeredProvider,
    options: tuple[str, ...] = MANDATORY_OPTIONS,
) -> None:
    """Fail on the first option *provider* doesn't supply.

    Raises:
        MissingMandatoryOption: for the first missing path; later paths are not checked.
    """
    for option in options:
        if not provider.contains(option):
            logger.error("config_mandatory_option_missing", option=option, layers=provider.names)
            raise MissingMandatoryOption(option)


__all__ = ["MANDATORY_OPTIONS", "check_mandatory_options"]
