"""
Settings package for simple-buildnumber.

Settings are split into:
- base.py: Common settings shared across all environments
- development.py: Local settings (DEBUG logging)
- ci.py: Build server settings (explicit counter file location)

Usage:
    Set BUILDNUMBER_SETTINGS_MODULE environment variable to select the configuration:
    - buildnumber.settings.base (default)
    - buildnumber.settings.development
    - buildnumber.settings.ci
"""
