"""
Command Sequence Builder

Architectural Intent:
- Pure domain service turning a change set reference and the deployment's
  host topology into the ordered shell commands of one lifecycle phase
- One builder per target shell dialect; get_sequence_builder() picks it
- No I/O: script existence is only checked by the remote shell

Command Layout (Unix):
- init:   mkdir repos, download the branch archive, extract it, chmod config-sets
- apply:  <env> ./repos/<repo>-<branch>/config-sets/<name>/config-init.sh,
          then apply-config.sh
- revert: <env> .../revert-config.sh
- deinit: rm -rf repos

The environment prefix is built by prepending: productHome first, then each
host in order, so the last host ends up as the outermost export. Downstream
scripts rely on this order when labels collide.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from configset.domain.exceptions import InvalidReference, UnsupportedPlatformError
from configset.domain.value_objects.change_set_operation import ChangeSetOperation
from configset.domain.value_objects.change_set_reference import ChangeSetReference
from configset.domain.value_objects.host_binding import HostBinding

REPOS_DIR = "repos"
CONFIG_SETS_DIR = "config-sets"
INIT_SCRIPT = "config-init.sh"
APPLY_SCRIPT = "apply-config.sh"
REVERT_SCRIPT = "revert-config.sh"


class CommandSequenceBuilder(ABC):
    """Builds the command sequence of every lifecycle phase for one shell dialect."""

    platform: str = ""

    @abstractmethod
    def build_init_commands(self, ref: ChangeSetReference) -> list[str]:
        ...

    @abstractmethod
    def build_apply_commands(
        self,
        ref: ChangeSetReference,
        product_home: Optional[str] = None,
        hosts: Sequence[HostBinding] = (),
    ) -> list[str]:
        ...

    @abstractmethod
    def build_revert_commands(
        self,
        ref: ChangeSetReference,
        product_home: Optional[str] = None,
        hosts: Sequence[HostBinding] = (),
    ) -> list[str]:
        ...

    @abstractmethod
    def build_deinit_commands(self) -> list[str]:
        ...

    def build(
        self,
        operation: ChangeSetOperation,
        ref: Optional[ChangeSetReference] = None,
        product_home: Optional[str] = None,
        hosts: Sequence[HostBinding] = (),
    ) -> list[str]:
        if operation is ChangeSetOperation.DEINIT:
            return self.build_deinit_commands()
        if ref is None:
            raise InvalidReference(f"{operation.value} requires a change set reference")
        if operation is ChangeSetOperation.INIT:
            return self.build_init_commands(ref)
        if operation is ChangeSetOperation.APPLY:
            return self.build_apply_commands(ref, product_home, hosts)
        return self.build_revert_commands(ref, product_home, hosts)


class UnixCommandSequenceBuilder(CommandSequenceBuilder):
    """Bourne-shell commands; output of every step is discarded at the remote shell."""

    platform = "unix"
    discard_output = "&>/dev/null"

    def change_set_location(self, ref: ChangeSetReference) -> str:
        if not ref.change_set_name:
            raise InvalidReference(f"Change set name is not set for {ref.repository_url!r}")
        return (
            f"./{REPOS_DIR}/{ref.directory_name}/{CONFIG_SETS_DIR}/{ref.change_set_name}"
        )

    def environment_prefix(
        self,
        product_home: Optional[str] = None,
        hosts: Sequence[HostBinding] = (),
    ) -> str:
        prefix = ""
        if product_home:
            prefix = f"export productHome={product_home} && "
        for host in hosts:
            prefix = host.export_clause() + prefix
        return prefix

    def _script(self, location: str, script: str) -> str:
        return f"{location}/{script} {self.discard_output}"

    def build_init_commands(self, ref: ChangeSetReference) -> list[str]:
        extracted = f"{REPOS_DIR}/{ref.directory_name}/{CONFIG_SETS_DIR}/"
        return [
            f"mkdir {REPOS_DIR}",
            f"cd {REPOS_DIR} && curl -LJO {ref.archive_url} {self.discard_output}",
            f"cd {REPOS_DIR} && tar xvzf {ref.archive_file_name} {self.discard_output}",
            f"chmod -R 755 {extracted} {self.discard_output}",
        ]

    def build_apply_commands(
        self,
        ref: ChangeSetReference,
        product_home: Optional[str] = None,
        hosts: Sequence[HostBinding] = (),
    ) -> list[str]:
        location = self.environment_prefix(product_home, hosts) + self.change_set_location(ref)
        return [
            self._script(location, INIT_SCRIPT),
            self._script(location, APPLY_SCRIPT),
        ]

    def build_revert_commands(
        self,
        ref: ChangeSetReference,
        product_home: Optional[str] = None,
        hosts: Sequence[HostBinding] = (),
    ) -> list[str]:
        location = self.environment_prefix(product_home, hosts) + self.change_set_location(ref)
        return [self._script(location, REVERT_SCRIPT)]

    def build_deinit_commands(self) -> list[str]:
        return [f"rm -rf {REPOS_DIR}"]


_BUILDERS: dict[str, type[CommandSequenceBuilder]] = {
    "unix": UnixCommandSequenceBuilder,
    "linux": UnixCommandSequenceBuilder,
    "darwin": UnixCommandSequenceBuilder,
    "posix": UnixCommandSequenceBuilder,
}


def get_sequence_builder(platform: str = "unix") -> CommandSequenceBuilder:
    """Return the builder for a target platform name (case-insensitive)."""
    builder_cls = _BUILDERS.get((platform or "").strip().lower())
    if builder_cls is None:
        raise UnsupportedPlatformError(
            f"No change set command builder for platform: {platform!r}"
        )
    return builder_cls()
