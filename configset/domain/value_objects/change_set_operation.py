from enum import Enum


class ChangeSetOperation(Enum):
    """Lifecycle phases a change set goes through on every agent."""
    INIT = "init"
    APPLY = "apply"
    REVERT = "revert"
    DEINIT = "deinit"

    @property
    def needs_change_set(self) -> bool:
        return self in (ChangeSetOperation.APPLY, ChangeSetOperation.REVERT)

    @property
    def needs_repository(self) -> bool:
        return self is not ChangeSetOperation.DEINIT
