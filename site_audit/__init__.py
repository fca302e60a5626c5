# site_audit/__init__.py
"""
SiteAudit package initializer.
Defines package version.
"""
__version__ = "0.1.0"
