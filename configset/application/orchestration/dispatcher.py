"""
Command Dispatcher

Architectural Intent:
- Runs a command sequence on every agent of a test plan and aggregates
  the exit codes into one DispatchReport
- Discovery failure aborts before any command is sent
- A failing or raising command never stops the loop: every command on every
  agent runs so that all failures are logged

Parallelization Strategy:
- max_parallel_agents == 1: agents one after another, in directory order
- max_parallel_agents > 1: agents run concurrently under a semaphore, commands
  inside one agent stay strictly ordered
- The verdict is computed only after every agent has finished
"""

from __future__ import annotations
import asyncio
import logging
from typing import Callable, Optional, Sequence

from configset.domain.exceptions import AgentDiscoveryError, ChannelError
from configset.domain.ports.agent_directory_port import AgentDirectoryPort
from configset.domain.ports.command_channel_port import CommandChannelPort
from configset.domain.value_objects.agent import Agent
from configset.domain.value_objects.command_outcome import (
    CommandOutcome,
    DispatchReport,
)

logger = logging.getLogger(__name__)
output_logger = logging.getLogger("configset.agent_output")

LineSink = Callable[[str, str], None]


def log_agent_output(agent_id: str, line: str) -> None:
    output_logger.info(line, extra={"agent_id": agent_id})


class CommandDispatcher:
    def __init__(
        self,
        directory: AgentDirectoryPort,
        channel: CommandChannelPort,
        max_parallel_agents: int = 1,
        line_sink: Optional[LineSink] = None,
    ) -> None:
        if max_parallel_agents < 1:
            raise ValueError(
                f"max_parallel_agents must be at least 1, got {max_parallel_agents}"
            )
        self.directory = directory
        self.channel = channel
        self.max_parallel_agents = max_parallel_agents
        self.line_sink = line_sink or log_agent_output

    async def dispatch(
        self, test_plan_id: str, commands: Sequence[str]
    ) -> DispatchReport:
        try:
            agents = await self.directory.list_agents(test_plan_id)
        except AgentDiscoveryError as e:
            logger.error(
                "Error in API call request to get agent list for test plan %s: %s",
                test_plan_id,
                e,
                extra={"test_plan_id": test_plan_id},
            )
            return DispatchReport.failed(test_plan_id, str(e))

        if not agents:
            logger.warning(
                "No agents registered for test plan %s, nothing to execute",
                test_plan_id,
                extra={"test_plan_id": test_plan_id},
            )
            return DispatchReport(test_plan_id=test_plan_id)

        if self.max_parallel_agents == 1:
            outcomes: list[CommandOutcome] = []
            for agent in agents:
                outcomes.extend(await self._run_agent(test_plan_id, agent, commands))
        else:
            semaphore = asyncio.Semaphore(self.max_parallel_agents)

            async def bounded(agent: Agent) -> list[CommandOutcome]:
                async with semaphore:
                    return await self._run_agent(test_plan_id, agent, commands)

            per_agent = await asyncio.gather(*(bounded(a) for a in agents))
            outcomes = [o for agent_outcomes in per_agent for o in agent_outcomes]

        report = DispatchReport(test_plan_id=test_plan_id, outcomes=tuple(outcomes))
        if report.succeeded:
            logger.info(
                "All %d command(s) succeeded on %d agent(s) for test plan %s",
                len(outcomes),
                len(agents),
                test_plan_id,
            )
        else:
            logger.error(
                "%d of %d command(s) failed for test plan %s",
                len(report.failures),
                len(outcomes),
                test_plan_id,
            )
        return report

    async def _run_agent(
        self, test_plan_id: str, agent: Agent, commands: Sequence[str]
    ) -> list[CommandOutcome]:
        logger.info(
            "Start sending commands to agent %s",
            agent.agent_id,
            extra={"agent_id": agent.agent_id, "test_plan_id": test_plan_id},
        )
        outcomes = []
        for command in commands:
            outcomes.append(await self._execute(test_plan_id, agent, command))
        return outcomes

    async def _execute(
        self, test_plan_id: str, agent: Agent, command: str
    ) -> CommandOutcome:
        context = {"agent_id": agent.agent_id, "test_plan_id": test_plan_id}
        logger.info("Execute: %s", command, extra=context)

        def on_line(line: str) -> None:
            self.line_sink(agent.agent_id, line)

        try:
            exit_code = await self.channel.execute(agent.agent_id, command, on_line)
        except ChannelError as e:
            logger.error(
                "Error in API call request to execute script on agent %s: %s",
                agent.agent_id,
                e,
                extra={**context, "operation_id": e.operation_id},
            )
            return CommandOutcome(agent.agent_id, command, error=str(e))
        except Exception as e:
            logger.exception(
                "Unexpected error executing script on agent %s",
                agent.agent_id,
                extra=context,
            )
            return CommandOutcome(
                agent.agent_id, command, error=f"{type(e).__name__}: {e}"
            )

        outcome = CommandOutcome(agent.agent_id, command, exit_code=exit_code)
        logger.info(
            "Agent exit value: %d for agent %s test plan %s",
            exit_code,
            agent.agent_id,
            test_plan_id,
            extra=context,
        )
        if outcome.timed_out:
            logger.error(
                "Agent %s timed out waiting for the shell to finish", agent.agent_id,
                extra=context,
            )
        elif not outcome.succeeded:
            logger.error(
                "Agent script execution failed with exit value %d on agent %s",
                exit_code,
                agent.agent_id,
                extra=context,
            )
        return outcome
