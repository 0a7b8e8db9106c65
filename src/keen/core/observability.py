"""
Logfire setup for applications built on Keen.

The library only emits spans and logs; applications decide where they go by
calling ``configure_logfire`` once at startup.
"""

import os
from typing import Optional

import logfire

from keen.core.config import LoggingConfig


def configure_logfire(config: Optional[LoggingConfig] = None, send_to_logfire: Optional[bool] = None) -> None:
    """
    Configure logfire for a Keen application.

    Args:
        config: Logging configuration providing the service name
        send_to_logfire: Force exporting on or off; by default spans are
            exported only when a token is present
    """
    config = config or LoggingConfig()
    logfire.configure(
        token=os.getenv("LOGFIRE_TOKEN") or None,
        service_name=os.getenv("LOGFIRE_SERVICE_NAME", config.service_name),
        environment=os.getenv("LOGFIRE_ENVIRONMENT", "development"),
        send_to_logfire="if-token-present" if send_to_logfire is None else send_to_logfire,
        console=False
    )
