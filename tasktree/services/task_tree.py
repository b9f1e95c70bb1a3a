"""
Pure status rules and tree helpers.

Nothing here touches the database: the functions take statuses or task rows
already loaded by the repository, which keeps the propagation rules easy to
test on their own.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence

from tasktree.models.task import Task, TaskStatus
from tasktree.schemas.task import TaskNode


def _as_status(value) -> TaskStatus:
    return value if isinstance(value, TaskStatus) else TaskStatus(value)


def effective_status(requested: TaskStatus, child_statuses: Sequence[TaskStatus]) -> TaskStatus:
    """
    Status actually persisted for a requested change.

    A DONE request on a task with no unfinished children (no children at all,
    or every child COMPLETE) is promoted to COMPLETE. Other requests are
    applied unchanged.
    """
    if requested is TaskStatus.DONE:
        if all(_as_status(s) is TaskStatus.COMPLETE for s in child_statuses):
            return TaskStatus.COMPLETE
    return requested


def reevaluate_parent(child_statuses: Sequence[TaskStatus]) -> Optional[TaskStatus]:
    """
    Parent status implied by its children, or None to leave it unchanged.

    All COMPLETE gives COMPLETE; otherwise any IN_PROGRESS gives DONE; a mix
    of DONE and COMPLETE leaves the parent alone.
    """
    statuses = [_as_status(s) for s in child_statuses]
    if all(s is TaskStatus.COMPLETE for s in statuses):
        return TaskStatus.COMPLETE
    if any(s is TaskStatus.IN_PROGRESS for s in statuses):
        return TaskStatus.DONE
    return None


def toggle_target(current: TaskStatus, child_statuses: Sequence[TaskStatus]) -> TaskStatus:
    """Status requested when the user flips a task's checkbox."""
    current = _as_status(current)
    statuses = [_as_status(s) for s in child_statuses]

    if current is TaskStatus.COMPLETE:
        return TaskStatus.IN_PROGRESS
    if not statuses:
        return TaskStatus.COMPLETE
    if any(s is TaskStatus.IN_PROGRESS for s in statuses):
        return TaskStatus.DONE
    return TaskStatus.COMPLETE


def build_children_map(tasks: Iterable[Task]) -> Dict[Optional[int], List[Task]]:
    """Adjacency map from parent id (None for roots) to direct children."""
    children: Dict[Optional[int], List[Task]] = defaultdict(list)
    for task in tasks:
        children[task.parent_task_id].append(task)
    return children


def filter_by_status(tasks: Sequence[Task], status: TaskStatus) -> List[Task]:
    """
    Tasks whose own status matches, or that have a direct child in it.
    """
    children = build_children_map(tasks)
    kept = []
    for task in tasks:
        if _as_status(task.status) is status:
            kept.append(task)
        elif any(_as_status(c.status) is status for c in children.get(task.id, ())):
            kept.append(task)
    return kept


def build_hierarchy(tasks: Sequence[Task]) -> List[TaskNode]:
    """
    Nest tasks under their parents.

    Roots are tasks without a parent. A task whose parent is not among
    ``tasks`` is dropped together with its subtree. Linking is a flat pass
    over the adjacency, never a recursive descent.
    """
    nodes = {task.id: TaskNode.model_validate(task) for task in tasks}
    children = build_children_map(tasks)

    for parent_id, kids in children.items():
        parent = nodes.get(parent_id) if parent_id is not None else None
        if parent is not None:
            parent.children.extend(nodes[kid.id] for kid in kids)

    # Nodes in a stored cycle never hang off a root and are not rendered.
    return [nodes[task.id] for task in children.get(None, ())]


def unreachable_task_ids(tasks: Sequence[Task]) -> List[int]:
    """
    Ids of tasks that cannot be reached by walking down from a root.

    In a healthy tree this is empty. Anything listed sits in a stored parent
    cycle or hangs below one.
    """
    children = build_children_map(tasks)
    seen = set()
    pending = [task.id for task in children.get(None, ())]
    while pending:
        task_id = pending.pop()
        if task_id in seen:
            continue
        seen.add(task_id)
        pending.extend(kid.id for kid in children.get(task_id, ()))
    return sorted(task.id for task in tasks if task.id not in seen)
