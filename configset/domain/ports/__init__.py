"""
Domain Ports Package

Architectural Intent:
- Contains port interfaces (abstract contracts) for external dependencies
- Ports define what the domain needs, adapters implement how
- Follows Hexagonal Architecture principles
"""

from configset.domain.ports.agent_directory_port import AgentDirectoryPort
from configset.domain.ports.command_channel_port import (
    CommandChannelPort,
    LineCallback,
)

__all__ = [
    "AgentDirectoryPort",
    "CommandChannelPort",
    "LineCallback",
]
