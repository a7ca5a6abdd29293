"""
Tinkerer Infrastructure

Architectural Intent:
- Adapters for the Tinkerer remote agent control plane
- Agent discovery and command execution over a shared httpx.AsyncClient
"""

from configset.infrastructure.tinkerer.agent_directory import TinkererAgentDirectory
from configset.infrastructure.tinkerer.client import (
    AsyncCommandResponse,
    create_http_client,
)
from configset.infrastructure.tinkerer.command_channel import TinkererCommandChannel

__all__ = [
    "AsyncCommandResponse",
    "TinkererAgentDirectory",
    "TinkererCommandChannel",
    "create_http_client",
]
