"""
Change Set Executor Use Case

Architectural Intent:
- Entry point for the four change set lifecycle operations on a test plan:
  init, apply, revert and deinit
- Each operation validates the reference, builds the command sequence for the
  target shell dialect and hands it to the CommandDispatcher
- Boolean entry points never raise for remote failures; run() exposes the
  structured DispatchReport for callers that need per-command detail

Lifecycle (per invocation, nothing is persisted):
    Validating -> Building -> Discovering -> Dispatching -> Aggregating -> Done
"""

from __future__ import annotations
import logging
import os
from typing import Mapping, Optional, Sequence

from configset.application.orchestration.dispatcher import CommandDispatcher
from configset.domain.exceptions import InvalidReference
from configset.domain.services.command_sequence_builder import CommandSequenceBuilder
from configset.domain.value_objects.change_set_operation import ChangeSetOperation
from configset.domain.value_objects.change_set_reference import ChangeSetReference
from configset.domain.value_objects.command_outcome import DispatchReport
from configset.domain.value_objects.host_binding import HostBinding

logger = logging.getLogger(__name__)

PRODUCT_HOME_ENV = "PRODUCT_HOME"


class ChangeSetExecutor:
    def __init__(
        self,
        builder: CommandSequenceBuilder,
        dispatcher: CommandDispatcher,
        product_home_env: str = PRODUCT_HOME_ENV,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.builder = builder
        self.dispatcher = dispatcher
        self.product_home_env = product_home_env
        self._environ = environ

    def _product_home(self) -> Optional[str]:
        environ = self._environ if self._environ is not None else os.environ
        product_home = environ.get(self.product_home_env)
        if not product_home:
            logger.warning(
                "%s environment variable is not set. JMeter test executions may fail.",
                self.product_home_env,
            )
            return None
        return product_home

    async def run(
        self,
        operation: ChangeSetOperation,
        test_plan_id: str,
        ref: Optional[ChangeSetReference] = None,
        hosts: Sequence[HostBinding] = (),
    ) -> DispatchReport:
        """Build the command sequence for an operation and dispatch it.

        InvalidReference is reported as a failed DispatchReport before any
        network call is made.
        """
        if ref is not None and operation.needs_repository and not ref.has_explicit_branch:
            logger.warning(
                "Config change set repository branch name is not set. Using default "
                "repository branch as %s for test plan id %s config change set %s",
                ref.branch,
                test_plan_id,
                ref.change_set_name or "-",
                extra={"test_plan_id": test_plan_id},
            )

        product_home = self._product_home() if operation.needs_change_set else None
        try:
            commands = self.builder.build(operation, ref, product_home, hosts)
        except InvalidReference as e:
            logger.error(
                "Cannot %s config change set for test plan %s: %s",
                operation.value,
                test_plan_id,
                e,
                extra={"test_plan_id": test_plan_id},
            )
            return DispatchReport.failed(test_plan_id, str(e))

        logger.info(
            "Running %s of config change set %s on test plan %s (%d command(s))",
            operation.value,
            ref.change_set_name if ref and ref.change_set_name else "-",
            test_plan_id,
            len(commands),
        )
        return await self.dispatcher.dispatch(test_plan_id, commands)

    async def init(self, test_plan_id: str, ref: ChangeSetReference) -> bool:
        """Fetch and extract the change set repository on every agent."""
        report = await self.run(ChangeSetOperation.INIT, test_plan_id, ref)
        return report.succeeded

    async def apply(
        self,
        test_plan_id: str,
        ref: ChangeSetReference,
        hosts: Sequence[HostBinding] = (),
    ) -> bool:
        """Run config-init.sh then apply-config.sh of the change set on every agent."""
        report = await self.run(ChangeSetOperation.APPLY, test_plan_id, ref, hosts)
        return report.succeeded

    async def revert(
        self,
        test_plan_id: str,
        ref: ChangeSetReference,
        hosts: Sequence[HostBinding] = (),
    ) -> bool:
        """Run revert-config.sh of the change set on every agent."""
        report = await self.run(ChangeSetOperation.REVERT, test_plan_id, ref, hosts)
        return report.succeeded

    async def deinit(self, test_plan_id: str) -> bool:
        """Remove everything init left behind on every agent."""
        report = await self.run(ChangeSetOperation.DEINIT, test_plan_id)
        return report.succeeded
