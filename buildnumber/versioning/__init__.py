"""
Versioning package for simple-buildnumber.

It handles:
- The persisted build counter (store)
- Parsing, composing and writing back the project version (updater)
- The goals run by the host build (goals)
"""
