"""Generation-stamped background refresh of worktree status and commit age."""

import queue
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from cwt.constants import POOL_SIZE
from cwt.logging_config import get_logger
from cwt.models.worktree import StatusProbe
from cwt.services.git_service import probe_status
from cwt.state.messages import CommitAgeUpdate, Message, StatusUpdate
from cwt.state.update import update

if TYPE_CHECKING:
    from cwt.core.repository import Repository
    from cwt.state.model import Model

logger = get_logger(__name__)


@dataclass(frozen=True)
class StatusTask:
    """One status probe: which worktree, where to report, which generation."""

    path: str
    sink: "queue.Queue[Message]"
    generation: int


@dataclass(frozen=True)
class _AgeTarget:
    repository: "Repository"
    path: str
    sha: Optional[str]


class RefreshEngine:
    """Fetches worktree status and commit ages off the UI thread.

    Each `start` bumps the model's generation and tags all new work with it.
    Earlier work is never cancelled; its results carry an old generation and
    the update step discards them.
    """

    def __init__(
        self,
        results: Optional["queue.Queue[Message]"] = None,
        workers: int = POOL_SIZE,
        probe: Callable[[str], StatusProbe] = probe_status,
    ):
        """Start the status worker pool.

        Args:
            results: Channel results are posted to; created if not given
            workers: Number of persistent status workers
            probe: Status check run for each worktree
        """
        self.results: "queue.Queue[Message]" = results if results is not None else queue.Queue()
        self._probe = probe
        self._executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="cwt-status")

    def start(self, model: "Model") -> int:
        """Begin a refresh cycle for the model's current worktrees.

        Must be called on the UI thread. Safe to call repeatedly.

        Returns:
            The generation of the new cycle
        """
        generation = model.increment_generation()
        targets = [_AgeTarget(wt.repository, wt.path, wt.sha) for wt in model.worktrees]
        logger.debug(f"Starting refresh generation {generation} for {len(targets)} worktrees")

        threading.Thread(
            target=self._fetch_ages,
            args=(targets, generation),
            name=f"cwt-ages-{generation}",
            daemon=True,
        ).start()

        for target in targets:
            task = StatusTask(target.path, self.results, generation)
            self._executor.submit(self._run_status_task, task)

        return generation

    def _run_status_task(self, task: StatusTask) -> None:
        try:
            probe = self._probe(task.path)
        except Exception as e:
            logger.debug(f"Status probe crashed for {task.path}: {e}")
            return

        if not probe.ok:
            # Unknown status: the worktree keeps whatever it showed before
            logger.debug(f"Status unknown for {task.path}: {probe.error}")
            return
        task.sink.put(
            StatusUpdate(path=task.path, dirty=bool(probe.dirty), generation=task.generation)
        )

    def _fetch_ages(self, targets: List[_AgeTarget], generation: int) -> None:
        # Hashes must be looked up in their own repository or git reports a bad object
        groups: Dict["Repository", List[_AgeTarget]] = {}
        for target in targets:
            groups.setdefault(target.repository, []).append(target)

        for repository, group in groups.items():
            try:
                ages = repository.commit_ages([t.sha for t in group])
            except Exception as e:
                logger.debug(f"Commit age lookup failed in {repository.root}: {e}")
                continue

            for target in group:
                age = ages.get(target.sha) if target.sha else None
                if age:
                    self.results.put(
                        CommitAgeUpdate(path=target.path, age=age, generation=generation)
                    )

    def drain(self, model: "Model") -> int:
        """Apply every queued result to the model without blocking.

        Returns:
            Number of messages processed
        """
        processed = 0
        while True:
            try:
                message = self.results.get_nowait()
            except queue.Empty:
                return processed
            update(model, message)
            processed += 1

    def close(self) -> None:
        """Stop accepting work; queued probes are dropped, running ones finish."""
        self._executor.shutdown(wait=False, cancel_futures=True)
