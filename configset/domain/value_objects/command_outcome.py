"""
Command Outcome Value Objects

Architectural Intent:
- CommandOutcome records what happened to one command on one agent
- DispatchReport folds all outcomes of one dispatch into a single verdict
- A failure never hides the remaining outcomes; the verdict is an OR over failures
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

# Exit value reported by the agent when the shell did not finish in time
TIMEOUT_EXIT_CODE = 408


@dataclass(frozen=True)
class CommandOutcome:
    agent_id: str
    command: str
    exit_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.exit_code == 0

    @property
    def timed_out(self) -> bool:
        return self.exit_code == TIMEOUT_EXIT_CODE


@dataclass(frozen=True)
class DispatchReport:
    test_plan_id: str
    outcomes: tuple[CommandOutcome, ...] = ()
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        if self.error is not None:
            return False
        return all(o.succeeded for o in self.outcomes)

    @property
    def failures(self) -> list[CommandOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    @property
    def agent_ids(self) -> list[str]:
        seen: dict[str, None] = {}
        for outcome in self.outcomes:
            seen.setdefault(outcome.agent_id)
        return list(seen)

    @classmethod
    def failed(cls, test_plan_id: str, error: str) -> "DispatchReport":
        return cls(test_plan_id=test_plan_id, error=error)
