"""
Command Channel Port

Architectural Intent:
- Port interface for running one shell command on one agent
- Output is pulled line by line and handed to an observability callback;
  only the exit code is returned
- Implemented by the Tinkerer operation adapter and by test fakes
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

LineCallback = Callable[[str], None]


class CommandChannelPort(ABC):
    """
    Port interface for remote command execution.
    """

    @abstractmethod
    async def execute(
        self,
        agent_id: str,
        command: str,
        on_line: Optional[LineCallback] = None,
    ) -> int:
        """
        Executes a command on the agent and returns its exit value.
        Each output line is passed to on_line as it is read.
        Raises ChannelError if the session cannot be opened or drained.
        """
        pass
