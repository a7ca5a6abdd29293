"""
Domain Services Package

Architectural Intent:
- Contains domain services implementing change set logic without I/O
"""

from configset.domain.services.command_sequence_builder import (
    CommandSequenceBuilder,
    UnixCommandSequenceBuilder,
    get_sequence_builder,
)

__all__ = [
    "CommandSequenceBuilder",
    "UnixCommandSequenceBuilder",
    "get_sequence_builder",
]
