"""
Centralized application configuration.

Edit the variables below to configure development settings.
"""

import logging

# =============================================================================
# DEVELOPMENT SETTINGS - Edit these for local development
# =============================================================================
LOG_LEVEL = "DEBUG"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
LOG_TO_CONSOLE = True  # Set to True to output logs to terminal
# =============================================================================

# =============================================================================
# SETTINGS WINDOW
# =============================================================================
COLLABORATOR_TIMEOUT_SECONDS = 10.0  # read calls only; None waits forever
STATUS_DISPLAY_MS = 3000  # How long save status messages stay visible
# =============================================================================


def get_log_level() -> int:
    """Get the logging level as an integer."""
    return getattr(logging, LOG_LEVEL.upper(), logging.INFO)
