"""Pure task domain logic - no I/O dependencies."""

import logging
from dataclasses import dataclass, field
from typing import Sequence

from .records import TASK_STATUSES, Task

logger = logging.getLogger(__name__)


@dataclass
class ParentTask:
    """A top-level task and its one level of subtasks."""

    task: Task
    subtasks: list[Task] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.task.id

    def progress(self) -> tuple[int, int]:
        """(completed, total) subtasks."""
        done = sum(1 for s in self.subtasks if s.is_completed)
        return done, len(self.subtasks)


def compose_tasks(tasks: Sequence[Task]) -> list[ParentTask]:
    """
    Nest subtasks under their parents.

    Parents and subtasks keep their input order. Every parent gets all the
    subtasks that reference its id, so top-level tasks sharing an id each
    get the same subtasks. Subtasks whose parent is not a top-level task in
    the input are left out; see find_orphans.
    Pure function - no I/O.
    """
    children: dict[str, list[Task]] = {}
    for t in tasks:
        if t.parent_task_id:
            children.setdefault(t.parent_task_id, []).append(t)

    parents = [ParentTask(task=t, subtasks=list(children.get(t.id, []))) for t in tasks if not t.parent_task_id]

    parent_ids = {p.id for p in parents}
    dropped = sum(len(c) for pid, c in children.items() if pid not in parent_ids)
    if dropped:
        logger.debug(f"Dropped {dropped} orphaned subtasks")

    return parents


def find_orphans(tasks: Sequence[Task]) -> list[Task]:
    """Subtasks whose parent_task_id matches no top-level task, in input order."""
    parent_ids = {t.id for t in tasks if not t.parent_task_id}
    return [t for t in tasks if t.parent_task_id and t.parent_task_id not in parent_ids]


def status_counts(tasks: Sequence[Task]) -> dict[str, int]:
    """Tasks per Kanban column, every column present."""
    counts = {status: 0 for status in TASK_STATUSES}
    for t in tasks:
        counts[t.status if t.status in counts else "todo"] += 1
    return counts


def filter_by_project(tasks: Sequence[Task], project_id: str) -> list[Task]:
    """Filter tasks to a specific project."""
    return [t for t in tasks if t.project_id == project_id]
