"""
Orchestration Package

Architectural Intent:
- Fans a command sequence out to the agents of a test plan
- Aggregates per-command exit codes into a single verdict
"""

from configset.application.orchestration.dispatcher import (
    CommandDispatcher,
    LineSink,
    log_agent_output,
)

__all__ = [
    "CommandDispatcher",
    "LineSink",
    "log_agent_output",
]
