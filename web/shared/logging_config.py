#!/usr/bin/env python3
"""
Process-wide logging setup used by every service entry point.
"""

import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

NOISY_LOGGERS = ('httpx', 'httpcore', 'openai', 'urllib3')


def setup_logging(level: int = logging.INFO) -> None:
    """Configure the root logger once and quiet chatty client libraries."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
