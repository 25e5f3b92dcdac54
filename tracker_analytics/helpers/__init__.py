"""Caller-facing helper functions for Tracker Analytics.

These helpers sit on top of the engines: they validate options and combine
several engine calls into one result. Engines never import from here.

Submodules:
    - config_helpers: voluptuous schema and validation for analytics options
    - report_helpers: One-call analytics report over a snapshot

Usage:
    from . import config_helpers
    from .report_helpers import build_analytics_report
"""

from . import config_helpers, report_helpers

__all__ = ["config_helpers", "report_helpers"]
