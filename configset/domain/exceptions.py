"""
Domain Exceptions

Architectural Intent:
- Error taxonomy shared by the builder, ports and use cases
- Structural errors (bad reference, discovery failure) abort an operation
- Per-command errors (ChannelError) are recorded and the dispatch loop continues
"""

from typing import Optional


class ConfigSetError(Exception):
    """Base class for all configset errors."""


class InvalidReference(ConfigSetError, ValueError):
    """Change set reference cannot be resolved to a repository directory."""


class UnsupportedPlatformError(ConfigSetError):
    """No command sequence builder exists for the requested platform."""


class AgentDiscoveryError(ConfigSetError):
    """Agent directory lookup failed (transport, auth or parse)."""


class ChannelError(ConfigSetError):
    """A command session could not be opened or its stream drained."""

    def __init__(
        self,
        message: str,
        agent_id: str = "",
        operation_id: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.agent_id = agent_id
        self.operation_id = operation_id
