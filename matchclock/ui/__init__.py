"""
User interface package for the match timeline engine.

This package contains the Flask JSON API used by the match console.
"""
from .web_app import create_app, run_web_app, WebAppState

__all__ = ["create_app", "run_web_app", "WebAppState"]
