# File: site_audit/report/__init__.py
"""site_audit.report: JSON and HTML report renderers used by the CLI and tests."""

from __future__ import annotations

from .html_report import DEFAULT_TEMPLATE_DIR, render_html
from .json_report import render_json

__all__ = ["DEFAULT_TEMPLATE_DIR", "render_json", "render_html"]
