"""
Tinkerer Command Channel

Architectural Intent:
- Implements CommandChannelPort on top of Tinkerer agent operations
- Drains the operation's output line by line into the caller's callback,
  closes the stream, then returns the operation's exit value
- Exit value 408 (agent-side timeout) is returned like any other exit code
"""

import logging
from typing import Optional

import httpx

from configset.domain.ports.command_channel_port import CommandChannelPort, LineCallback
from configset.infrastructure.tinkerer.client import AsyncCommandResponse

logger = logging.getLogger(__name__)


class TinkererCommandChannel(CommandChannelPort):
    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def execute(
        self,
        agent_id: str,
        command: str,
        on_line: Optional[LineCallback] = None,
    ) -> int:
        response = await AsyncCommandResponse.open(self._client, agent_id, command)
        try:
            while await response.has_more_content():
                line = await response.read_line()
                if on_line is not None:
                    on_line(line)
        finally:
            await response.end_stream()
        return await response.exit_value()
