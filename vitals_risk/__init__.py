"""Daily health telemetry risk scoring.

This package contains the scoring pipeline and its domain models,
free of any transport or storage concerns so it is easy to test and reason about.
"""

__version__ = "0.1.0"
