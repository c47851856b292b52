"""
log.py - Logging setup for entry points
"""

import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """Plain messages on stdout"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        stream=sys.stdout,
    )
