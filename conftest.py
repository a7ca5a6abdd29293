"""Global test configuration.

Shared fakes for the agent directory and command channel ports, plus the
reference data used across the domain, application and integration tests.
"""

import logging
from typing import Callable, Optional

import pytest

from configset.domain.ports.agent_directory_port import AgentDirectoryPort
from configset.domain.ports.command_channel_port import CommandChannelPort
from configset.domain.value_objects.agent import Agent
from configset.domain.value_objects.change_set_reference import ChangeSetReference
from configset.domain.value_objects.host_binding import HostBinding


class FakeDirectory(AgentDirectoryPort):
    def __init__(self, agent_ids=(), error: Optional[Exception] = None):
        self.agents = [Agent(agent_id=a) for a in agent_ids]
        self.error = error
        self.calls: list[str] = []

    async def list_agents(self, test_plan_id):
        self.calls.append(test_plan_id)
        if self.error is not None:
            raise self.error
        return list(self.agents)


class FakeChannel(CommandChannelPort):
    """Records every execution; the rule returns an exit code or an exception to raise."""

    def __init__(
        self,
        rule: Callable[[str, str], object] = lambda agent_id, command: 0,
        output: tuple[str, ...] = (),
    ):
        self.rule = rule
        self.output = output
        self.calls: list[tuple[str, str]] = []

    async def execute(self, agent_id, command, on_line=None):
        self.calls.append((agent_id, command))
        for line in self.output:
            if on_line is not None:
                on_line(line)
        result = self.rule(agent_id, command)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture(autouse=True)
def reset_configset_logger():
    """Undo configure_logging calls made by a test."""
    logger = logging.getLogger("configset")
    level, handlers = logger.level, list(logger.handlers)
    yield
    logger.setLevel(level)
    logger.handlers[:] = handlers


@pytest.fixture
def make_directory():
    return FakeDirectory


@pytest.fixture
def make_channel():
    return FakeChannel


@pytest.fixture
def reference():
    return ChangeSetReference(
        repository_url="https://github.com/org/repo",
        change_set_name="mySet",
    )


@pytest.fixture
def hosts():
    return [
        HostBinding(label="DB", ip_address="10.0.0.1"),
        HostBinding(label="APP", ip_address="10.0.0.2"),
    ]
