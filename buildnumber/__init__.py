"""
simple-buildnumber: build numbers for project versions.

This package contains:
- core: Project context, settings loading and the exception taxonomy
- versioning: The build counter store, the version updater and the goals
- settings: Environment-specific configuration modules
"""

__version__ = "2.0.0"
