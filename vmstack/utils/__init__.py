"""Utility module for common helper functions.

Note: Functions are imported lazily to avoid circular dependencies.
Import directly from submodules when needed:
  - from vmstack.utils.commands import ...
  - from vmstack.utils.logging_setup import ...
"""

# Only export module names, not individual functions
__all__ = [
    "commands",
    "logging_setup",
]
