"""Tessera utility modules.

- logging: Standardized logging with human/verbose/JSON modes
"""

from tessera.utils.logging import configure_from_config, get_logger, setup_logging

__all__ = [
    "configure_from_config",
    "get_logger",
    "setup_logging",
]
