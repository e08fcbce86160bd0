"""
CLI module - Application scaffold and commands.
"""

from appbase.cli.application import Application, Command, CommandContext

__all__ = ["Application", "Command", "CommandContext"]
