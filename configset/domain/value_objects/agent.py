"""
Agent Value Object

Architectural Intent:
- Identity of a running remote executor serving one host of a deployment
- Agents are discovered through the agent directory, never created here
- Only agentId is required; the remaining fields are informational
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Agent:
    agent_id: str
    test_plan_id: Optional[str] = None
    instance_name: Optional[str] = None
    instance_id: Optional[str] = None
    instance_user: Optional[str] = None
    provider: Optional[str] = None
    region: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.agent_id:
            raise ValueError("Agent ID cannot be empty")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Agent":
        """Build an Agent from the directory's camelCase JSON object."""
        if not isinstance(data, dict):
            raise ValueError(f"Agent entry must be an object, got {type(data).__name__}")
        agent_id = data.get("agentId")
        if not isinstance(agent_id, str) or not agent_id:
            raise ValueError(f"Agent entry has no agentId: {data!r}")
        return cls(
            agent_id=agent_id,
            test_plan_id=data.get("testPlanId"),
            instance_name=data.get("instanceName"),
            instance_id=data.get("instanceId"),
            instance_user=data.get("instanceUser"),
            provider=data.get("provider"),
            region=data.get("region"),
        )

    def __str__(self) -> str:
        return self.agent_id
