"""Orchestration tool services.

This package provides the pieces the session façade is built from:
- availability.py: one-time PATH check for the tool
- command.py: argument composition per operation
- runner.py: run-to-completion and streaming subprocess execution
- stream.py: line splitting and the LogSubscription handle
"""

from .availability import AvailabilityCheck
from .command import CommandComposer
from .runner import ProcessRunner
from .stream import LineSplitter, LogSubscription

__all__ = [
    "AvailabilityCheck",
    "CommandComposer",
    "ProcessRunner",
    "LineSplitter",
    "LogSubscription",
]
