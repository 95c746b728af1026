#!/usr/bin/env python3
"""
Main entry point for the match timeline web API.

This script configures logging and launches the Flask-based web server.
Environment overrides: MATCHCLOCK_HOST, MATCHCLOCK_PORT, MATCHCLOCK_LOG_LEVEL,
MATCHCLOCK_AUTOSAVE_DIR.
"""
import logging
import os

from matchclock.ui.web_app import run_web_app
from matchclock.utils import AUTOSAVE_DIR, DEFAULT_HOST, DEFAULT_LOG_LEVEL, DEFAULT_PORT

if __name__ == "__main__":
    logging.basicConfig(
        level=os.environ.get("MATCHCLOCK_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run_web_app(
        host=os.environ.get("MATCHCLOCK_HOST", DEFAULT_HOST),
        port=int(os.environ.get("MATCHCLOCK_PORT", DEFAULT_PORT)),
        autosave_dir=os.environ.get("MATCHCLOCK_AUTOSAVE_DIR", AUTOSAVE_DIR),
    )
