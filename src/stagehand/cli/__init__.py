"""
CLI commands for Stagehand.
"""

from stagehand.cli.plan import plan_command

__all__ = ["plan_command"]
