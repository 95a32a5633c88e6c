"""
Pulumi definition of the application resource set.

- settings: stack config to DeployConfigs
- stack: the resources themselves
"""

from vmstack.iac.settings import configs_from_pulumi
from vmstack.iac.stack import StackResources, define_stack

__all__ = ["StackResources", "configs_from_pulumi", "define_stack"]
