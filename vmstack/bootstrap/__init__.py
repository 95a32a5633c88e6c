"""Boot-time bootstrapper run by the VM, plus its startup-script shim.

Note: Functions are imported lazily to avoid circular dependencies.
Import directly from submodules when needed:
  - from vmstack.bootstrap.bootstrapper import ...
  - from vmstack.bootstrap.startup_script import ...
"""

# Only export module names, not individual functions
__all__ = [
    "bootstrapper",
    "cli",
    "compose",
    "env_file",
    "health",
    "repo",
    "startup_script",
    "system",
]
