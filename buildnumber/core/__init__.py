"""
Core package for simple-buildnumber.

Shared pieces used by the goals:
- ProjectContext: the slice of the host project model the goals read and write
- Option resolution from settings, project properties and explicit values
- The exception taxonomy (configuration, parse and storage errors)
"""
