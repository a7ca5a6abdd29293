"""
Agent Directory Port

Architectural Intent:
- Port interface for discovering the agents serving a test plan
- Implemented by the Tinkerer REST adapter and by test fakes
"""

from abc import ABC, abstractmethod
from typing import List
from configset.domain.value_objects.agent import Agent


class AgentDirectoryPort(ABC):
    """
    Port interface for agent discovery.
    """

    @abstractmethod
    async def list_agents(self, test_plan_id: str) -> List[Agent]:
        """
        Returns the agents currently registered for the test plan.
        An empty list means no agents, not an error.
        Raises AgentDiscoveryError if the lookup fails.
        """
        pass
