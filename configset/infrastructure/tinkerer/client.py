"""
Tinkerer HTTP Client

Architectural Intent:
- Builds the shared httpx.AsyncClient used by the Tinkerer adapters
- Wraps one running agent operation behind the pull contract
  has_more_content() / read_line() / end_stream() / exit_value()

Wire format (owned by the Tinkerer agent runtime):
- POST agent/{agent_id}/operation
      {"code": "SHELL", "request": "<command>"} -> {"operationId": "..."}
- GET  operation/{operation_id}/stream      -> text, one output line per line
- GET  operation/{operation_id}/exit-value  -> {"exitValue": <int>}

Design Decisions:
- Read timeout is disabled on the output stream; timeout detection belongs to
  the agent, which reports exit value 408
- Only one line is buffered at a time, content is pulled not pushed
- IDs are percent-encoded as single path segments
"""

from __future__ import annotations
from typing import AsyncIterator, Optional
from urllib.parse import quote
import logging

import httpx

from configset.domain.exceptions import ChannelError
from configset.infrastructure.config import TinkererConfig

logger = logging.getLogger(__name__)

SHELL_OPERATION_CODE = "SHELL"

# httpx.InvalidURL and httpx.StreamError do not derive from httpx.HTTPError
TRANSPORT_ERRORS = (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError)


def path_segment(value: str) -> str:
    return quote(str(value), safe="")


def create_http_client(
    config: TinkererConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create an AsyncClient bound to the Tinkerer base URL with Basic auth."""
    if not config.base_url:
        raise ValueError("Tinkerer base_url is not configured")
    return httpx.AsyncClient(
        base_url=config.base_url,
        auth=httpx.BasicAuth(config.username, config.password),
        headers={"Accept": "application/json"},
        timeout=httpx.Timeout(config.timeout_seconds),
        transport=transport,
    )


class AsyncCommandResponse:
    """Pull-based view of one agent operation's output and exit value."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        agent_id: str,
        operation_id: str,
        response: httpx.Response,
    ) -> None:
        self._client = client
        self.agent_id = agent_id
        self.operation_id = operation_id
        self._response = response
        self._lines: AsyncIterator[str] = response.aiter_lines()
        self._pending: Optional[str] = None
        self._exhausted = False
        self._closed = False

    @classmethod
    async def open(
        cls, client: httpx.AsyncClient, agent_id: str, command: str
    ) -> "AsyncCommandResponse":
        """Start the command on the agent and open its output stream."""
        try:
            created = await client.post(
                f"agent/{path_segment(agent_id)}/operation",
                json={"code": SHELL_OPERATION_CODE, "request": command},
            )
            created.raise_for_status()
            operation_id = created.json()["operationId"]
        except (*TRANSPORT_ERRORS, ValueError, KeyError, TypeError) as e:
            raise ChannelError(
                f"Error while starting operation on agent {agent_id}: {e}",
                agent_id=agent_id,
            ) from e

        try:
            request = client.build_request(
                "GET",
                f"operation/{path_segment(operation_id)}/stream",
                timeout=httpx.Timeout(client.timeout.connect, read=None),
            )
            response = await client.send(request, stream=True)
        except TRANSPORT_ERRORS as e:
            raise ChannelError(
                f"Error while start reading output of operation {operation_id}: {e}",
                agent_id=agent_id,
                operation_id=operation_id,
            ) from e
        if response.is_error:
            await response.aclose()
            raise ChannelError(
                f"Output stream of operation {operation_id} returned "
                f"HTTP {response.status_code}",
                agent_id=agent_id,
                operation_id=operation_id,
            )
        logger.debug("Opened operation %s on agent %s", operation_id, agent_id)
        return cls(client, agent_id, operation_id, response)

    def _error(self, message: str, cause: Exception) -> ChannelError:
        return ChannelError(
            f"{message} for operation {self.operation_id}: {cause}",
            agent_id=self.agent_id,
            operation_id=self.operation_id,
        )

    async def has_more_content(self) -> bool:
        if self._pending is not None:
            return True
        if self._exhausted or self._closed:
            return False
        try:
            self._pending = await anext(self._lines)
        except StopAsyncIteration:
            self._exhausted = True
            return False
        except TRANSPORT_ERRORS as e:
            raise self._error("Error while reading output", e) from e
        return True

    async def read_line(self) -> str:
        if not await self.has_more_content():
            raise ChannelError(
                f"No more content for operation {self.operation_id}",
                agent_id=self.agent_id,
                operation_id=self.operation_id,
            )
        line, self._pending = self._pending, None
        return line

    async def end_stream(self) -> None:
        if not self._closed:
            self._closed = True
            await self._response.aclose()

    async def exit_value(self) -> int:
        try:
            response = await self._client.get(
                f"operation/{path_segment(self.operation_id)}/exit-value"
            )
            response.raise_for_status()
            return int(response.json()["exitValue"])
        except (*TRANSPORT_ERRORS, ValueError, KeyError, TypeError) as e:
            raise self._error("Error while reading exit value", e) from e
