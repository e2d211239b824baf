"""
Django settings package for the PharmaPro pharmacy point-of-sale.

This package contains environment-specific settings modules:
- base.py: Common settings for all environments
- development.py: Development-specific settings (SQLite, verbose logging)
- production.py: Production-specific settings (PostgreSQL, JSON logging)
- test.py: Settings used by the pytest suite

The appropriate settings module is loaded based on the DJANGO_SETTINGS_MODULE
environment variable.
"""
