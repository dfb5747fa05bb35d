"""ghdiff - git diff step for CI pipelines.

Runs ``git diff`` against a base branch, parses the output into a structured
diff and publishes raw and JSON forms as step outputs and optional files.
"""

__version__ = "1.0.0"
__author__ = "ghdiff maintainers"

__all__ = ["__version__"]
