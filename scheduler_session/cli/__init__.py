"""CLI module for the Schedule Planner session extractor.

This package provides the command-line interface for extracting a session
from the portal and checking saved cookie jars.
"""

from .runner import ExitCode, exit_code_for, configure_logging

__all__ = [
    'ExitCode',
    'exit_code_for',
    'configure_logging',
]
