"""
Tinkerer Agent Directory

Architectural Intent:
- Implements AgentDirectoryPort against the Tinkerer REST API
- One authenticated GET per lookup: test-plan/{test_plan_id}/agents
- Any transport, status or parse problem becomes AgentDiscoveryError
"""

import logging
from typing import List

import httpx

from configset.domain.exceptions import AgentDiscoveryError
from configset.domain.ports.agent_directory_port import AgentDirectoryPort
from configset.domain.value_objects.agent import Agent
from configset.infrastructure.tinkerer.client import TRANSPORT_ERRORS, path_segment

logger = logging.getLogger(__name__)


class TinkererAgentDirectory(AgentDirectoryPort):
    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def list_agents(self, test_plan_id: str) -> List[Agent]:
        path = f"test-plan/{path_segment(test_plan_id)}/agents"
        try:
            response = await self._client.get(path)
            response.raise_for_status()
            payload = response.json()
        except TRANSPORT_ERRORS as e:
            raise AgentDiscoveryError(
                f"Error in API call request to get agent list {path}: {e}"
            ) from e
        except ValueError as e:
            raise AgentDiscoveryError(
                f"Agent list for test plan {test_plan_id} is not valid JSON: {e}"
            ) from e

        if not isinstance(payload, list):
            raise AgentDiscoveryError(
                f"Agent list for test plan {test_plan_id} is not a JSON array"
            )
        try:
            agents = [Agent.from_dict(entry) for entry in payload]
        except ValueError as e:
            raise AgentDiscoveryError(
                f"Malformed agent entry for test plan {test_plan_id}: {e}"
            ) from e

        logger.debug(
            "Found %d agent(s) for test plan %s", len(agents), test_plan_id
        )
        return agents
