"""Shared utility helpers used across the encoder library."""

from .config import (
    RuntimeConfig,
    get_config,
    configure,
)
from .logging import (
    PrivacyFilter,
    get_logger,
    configure_logging,
)
from .param_validation import (
    ensure,
    ensure_type,
    ensure_probability,
    ParamValidationError,
)
from .random import (
    create_rng,
    reseed_rng,
    split_rng,
)

__all__ = [
    "RuntimeConfig",
    "get_config",
    "configure",
    "PrivacyFilter",
    "get_logger",
    "configure_logging",
    "ensure",
    "ensure_type",
    "ensure_probability",
    "ParamValidationError",
    "create_rng",
    "reseed_rng",
    "split_rng",
]
