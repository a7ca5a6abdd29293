"""
Composition Root

Architectural Intent:
- Dependency injection composition root for configset
- Single place where adapters, dispatcher and executor are wired together
- Configuration is passed in explicitly; nothing here reads global state

Design Decisions:
- Uses a simple dataclass container instead of a DI framework
- Agents are reached through the Tinkerer directory and command channel
- Logging is configured from log_level and json_logs when the container is built
- The container owns the HTTP client and closes it in aclose()
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

import httpx

from configset.application.orchestration.dispatcher import CommandDispatcher
from configset.application.use_cases.change_set_executor import ChangeSetExecutor
from configset.domain.ports.agent_directory_port import AgentDirectoryPort
from configset.domain.ports.command_channel_port import CommandChannelPort
from configset.domain.services.command_sequence_builder import (
    CommandSequenceBuilder,
    get_sequence_builder,
)
from configset.infrastructure.config import ConfigSetConfig
from configset.infrastructure.logging import configure_logging
from configset.infrastructure.tinkerer import (
    TinkererAgentDirectory,
    TinkererCommandChannel,
    create_http_client,
)


@dataclass
class ConfigSetContainer:
    """DI container holding all wired dependencies."""

    config: ConfigSetConfig
    builder: CommandSequenceBuilder
    directory: AgentDirectoryPort
    channel: CommandChannelPort
    dispatcher: CommandDispatcher
    executor: ChangeSetExecutor
    http_client: httpx.AsyncClient

    async def aclose(self) -> None:
        await self.http_client.aclose()

    async def __aenter__(self) -> "ConfigSetContainer":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def create_container(
    config: ConfigSetConfig,
    http_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ConfigSetContainer:
    """Create and wire all dependencies for the configured platform."""
    configure_logging(config.log_level, config.json_logs)

    builder = get_sequence_builder(config.executor.platform)
    http_client = create_http_client(config.tinkerer, transport=http_transport)
    directory = TinkererAgentDirectory(http_client)
    channel = TinkererCommandChannel(http_client)

    dispatcher = CommandDispatcher(
        directory,
        channel,
        max_parallel_agents=config.executor.max_parallel_agents,
    )
    executor = ChangeSetExecutor(
        builder,
        dispatcher,
        product_home_env=config.executor.product_home_env,
    )

    return ConfigSetContainer(
        config=config,
        builder=builder,
        directory=directory,
        channel=channel,
        dispatcher=dispatcher,
        executor=executor,
        http_client=http_client,
    )
