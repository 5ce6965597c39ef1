"""Result of a run-to-completion command."""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class CommandResult:
    """Captured output of a finished orchestration command.

    stdout and stderr are the decoded streams, untrimmed.
    """

    stdout: str
    stderr: str
    returncode: int = 0
    command: List[str] = field(default_factory=list)
