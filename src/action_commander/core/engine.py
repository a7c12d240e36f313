"""Resolve, report on and pin the action versions used by workflows."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from action_commander.core.errors import ActionCommanderError, OperationCancelled, ResolutionError
from action_commander.core.progress import ProgressLogger
from action_commander.core.rewriter import rewrite_strategy_for_mode, rewrite_workflows
from action_commander.core.version_resolver import VersionResolver
from action_commander.models import PinMode
from action_commander.models.report import StepReport, WorkflowReport
from action_commander.models.workflow import Release, Root, Step, Workflow

logger = logging.getLogger(__name__)

# How often a blocked dispatcher re-checks for cancellation.
_ACQUIRE_POLL_SECONDS = 0.05


class Engine:
    """Drives a single resolution pass over every step of every workflow.

    Steps are resolved concurrently by up to ``workers`` threads.  Each task
    owns exactly one :class:`Step` (reached by index into its workflow) and
    only ever writes that step's action, so no per-step locking is needed.

    In lenient mode a failed step is reported and left unresolved.  In strict
    mode the first failure cancels the remaining work and is raised.
    """

    def __init__(
        self,
        root: Root,
        resolver: VersionResolver,
        *,
        workers: int = 1,
        strict: bool = False,
        progress: ProgressLogger | None = None,
        cancel_event: threading.Event | None = None,
    ):
        self.root = root
        self.resolver = resolver
        self.workers = max(1, workers or 1)
        self.strict = strict
        self.progress = progress or ProgressLogger()
        self.cancel_event = cancel_event or threading.Event()
        self.progress.precompute_widths(root)

    # ------------------------------------------------------------------
    # commands
    # ------------------------------------------------------------------

    def list_updates(self) -> list[WorkflowReport]:
        """Resolve every step with its upgrade candidates and build report rows."""
        self.resolve(PinMode.LATEST)
        reports: list[WorkflowReport] = []
        for workflow in self.root.sorted_workflows():
            if not workflow.steps:
                continue
            reports.append(WorkflowReport(
                file_path=workflow.file_path,
                steps=[StepReport.from_step(s) for s in workflow.steps],
            ))
        return reports

    def pin(self, mode: PinMode) -> None:
        """Resolve every step, then rewrite workflows to the mode's chosen hashes."""
        self.resolve(mode)
        self.progress.start_phase(
            f"pinning {self.root.step_count} action(s) to immutable hashes for their "
            f"{mode.label} versions in {self.root.workflow_count} workflow(s) ..."
        )
        rewrite_workflows(self.root, rewrite_strategy_for_mode(mode))
        self.progress.finish_phase("done!")

    def cancel(self) -> None:
        self.cancel_event.set()

    # ------------------------------------------------------------------
    # resolution
    # ------------------------------------------------------------------

    def resolve(self, mode: PinMode) -> None:
        """Resolve each step's ref to a release, in place.

        Upgrade candidates are only fetched when the mode has to choose
        between alternatives, i.e. never for ``PinMode.CURRENT``.
        """
        self.progress.start_phase(
            f"resolving action versions for {self.root.step_count} step(s) across "
            f"{self.root.workflow_count} workflow(s) with {self.workers} workers ..."
        )
        fetch_upgrades = mode is not PinMode.CURRENT
        slots = threading.BoundedSemaphore(self.workers)
        failures: list[ActionCommanderError] = []
        failures_lock = threading.Lock()

        def fail(workflow: Workflow, step: Step, error: ActionCommanderError) -> None:
            self.progress.error(workflow, step, str(error))
            if self.strict:
                with failures_lock:
                    failures.append(error)
                self.cancel_event.set()

        def run(workflow: Workflow, index: int) -> None:
            step = workflow.steps[index]
            try:
                if self.cancel_event.is_set():
                    return
                self._resolve_step(workflow, step, fetch_upgrades)
            except OperationCancelled:
                # another step's failure (or the caller) stopped the pass;
                # that cause is what gets reported
                return
            except ActionCommanderError as e:
                fail(workflow, step, e)
            except Exception as e:
                # a future's exception is never read, so nothing may escape
                logger.debug("engine: unexpected error resolving %s", step.action.label, exc_info=True)
                wrapped = ResolutionError(f"unexpected error resolving {step.action.label}: {e!r}")
                wrapped.__cause__ = e
                fail(workflow, step, wrapped)
            finally:
                slots.release()

        with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="acom-resolve") as pool:
            try:
                for workflow in self.root.sorted_workflows():
                    for index in range(len(workflow.steps)):
                        if not self._acquire(slots):
                            break
                        pool.submit(run, workflow, index)
                    if self.cancel_event.is_set():
                        break
            except KeyboardInterrupt:
                self.cancel_event.set()
                raise

        if failures:
            self.progress.finish_phase("failed!")
            self.progress.show_diagnostics()
            raise ResolutionError(f"failed to resolve actions: {failures[0]}") from failures[0]
        if self.cancel_event.is_set():
            self.progress.finish_phase("cancelled!")
            raise OperationCancelled("resolution cancelled")

        self.progress.finish_phase("done!")
        self.progress.show_diagnostics()

    def _acquire(self, slots: threading.BoundedSemaphore) -> bool:
        """Wait for a free worker slot, giving up once the pass is cancelled."""
        while not self.cancel_event.is_set():
            if slots.acquire(timeout=_ACQUIRE_POLL_SECONDS):
                return True
        return False

    def _resolve_step(self, workflow: Workflow, step: Step, fetch_upgrades: bool) -> None:
        action = step.action
        cancel = self.cancel_event

        # 1. ref (hash, branch, tag) -> commit hash
        self.progress.info(workflow, step, f"resolving commit hash for ref {action.ref}")
        try:
            commit = self.resolver.resolve_ref(action.repo, action.ref, cancel=cancel)
        except OperationCancelled:
            raise
        except ActionCommanderError as e:
            raise ResolutionError(f"failed to resolve commit hash for ref {action.ref}: {e}") from e

        # 2. commit hash -> semver tags, newest and most specific first.  A
        # commit without any version tag is fine and leaves the version empty.
        self.progress.info(workflow, step, f"resolving semver tags for commit hash {commit}")
        try:
            versions = self.resolver.tags_for_commit(action.repo, commit, cancel=cancel)
        except OperationCancelled:
            raise
        except ActionCommanderError as e:
            raise ResolutionError(f"failed to fetch version tags for resolved commit {commit}: {e}") from e

        action.release = Release(version=versions[0] if versions else "", commit_hash=commit)
        logger.debug(
            "engine: resolved %s ref=%s commit=%s versions=%s",
            action.name, action.ref, commit, versions,
        )

        # 3. upgrade candidates; failing here never fails the step
        if not fetch_upgrades:
            return
        version = action.release.version
        self.progress.info(workflow, step, f"finding upgrade candidates for version {version}")
        try:
            candidates = self.resolver.get_upgrade_candidates(action.repo, action.release, cancel=cancel)
        except OperationCancelled:
            raise
        except ActionCommanderError as e:
            self.progress.error(workflow, step, f"failed to get upgrade candidates for version {version}: {e}")
            return
        if candidates.empty:
            self.progress.warn(workflow, step, f"no upgrade candidates found for version {version}")
        action.upgrade_candidates = candidates
