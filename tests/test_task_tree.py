"""Unit tests for the pure status rules and tree helpers."""

import pytest

from tasktree.models.task import Task, TaskStatus
from tasktree.services.task_tree import (
    build_children_map,
    build_hierarchy,
    effective_status,
    filter_by_status,
    reevaluate_parent,
    toggle_target,
    unreachable_task_ids,
)

IN_PROGRESS = TaskStatus.IN_PROGRESS
DONE = TaskStatus.DONE
COMPLETE = TaskStatus.COMPLETE

pytestmark = pytest.mark.unit


def make(task_id, parent=None, status=IN_PROGRESS):
    return Task(id=task_id, name=f"task {task_id}", status=status.value, parent_task_id=parent)


class TestEffectiveStatus:
    def test_done_on_leaf_is_promoted(self):
        assert effective_status(DONE, []) is COMPLETE

    def test_done_with_all_children_complete_is_promoted(self):
        assert effective_status(DONE, [COMPLETE, COMPLETE]) is COMPLETE

    @pytest.mark.parametrize("children", [[IN_PROGRESS], [DONE], [COMPLETE, DONE]])
    def test_done_with_unfinished_child_stays_done(self, children):
        assert effective_status(DONE, children) is DONE

    def test_other_requests_pass_through(self):
        assert effective_status(IN_PROGRESS, []) is IN_PROGRESS
        assert effective_status(COMPLETE, [IN_PROGRESS]) is COMPLETE

    def test_accepts_raw_column_values(self):
        assert effective_status(DONE, ["COMPLETE"]) is COMPLETE


class TestReevaluateParent:
    def test_all_complete(self):
        assert reevaluate_parent([COMPLETE, COMPLETE]) is COMPLETE

    def test_any_in_progress(self):
        assert reevaluate_parent([COMPLETE, IN_PROGRESS, DONE]) is DONE

    def test_done_and_complete_mix_leaves_parent_alone(self):
        assert reevaluate_parent([DONE, COMPLETE]) is None
        assert reevaluate_parent([DONE]) is None


class TestToggleTarget:
    def test_leaf(self):
        assert toggle_target(IN_PROGRESS, []) is COMPLETE
        assert toggle_target(DONE, []) is COMPLETE
        assert toggle_target(COMPLETE, []) is IN_PROGRESS

    def test_parent_with_open_child(self):
        assert toggle_target(IN_PROGRESS, [IN_PROGRESS, COMPLETE]) is DONE

    def test_parent_without_open_children(self):
        assert toggle_target(DONE, [COMPLETE, DONE]) is COMPLETE

    def test_complete_parent_reopens(self):
        assert toggle_target(COMPLETE, [COMPLETE]) is IN_PROGRESS


def test_children_map_groups_by_parent():
    tasks = [make(1), make(2, parent=1), make(3, parent=1), make(4)]

    children = build_children_map(tasks)

    assert [t.id for t in children[None]] == [1, 4]
    assert [t.id for t in children[1]] == [2, 3]
    assert 2 not in children


def test_filter_keeps_parents_of_matching_children():
    tasks = [
        make(1, status=DONE),
        make(2, parent=1, status=IN_PROGRESS),
        make(3, status=COMPLETE),
    ]

    assert [t.id for t in filter_by_status(tasks, IN_PROGRESS)] == [1, 2]
    assert [t.id for t in filter_by_status(tasks, DONE)] == [1]
    assert [t.id for t in filter_by_status(tasks, COMPLETE)] == [3]


def test_hierarchy_nests_children():
    tasks = [make(1), make(2, parent=1), make(3, parent=2), make(4)]

    roots = build_hierarchy(tasks)

    assert [r.id for r in roots] == [1, 4]
    assert [c.id for c in roots[0].children] == [2]
    assert [c.id for c in roots[0].children[0].children] == [3]
    assert roots[1].children == []


def test_hierarchy_drops_tasks_whose_parent_is_missing():
    tasks = [make(2, parent=1), make(3, parent=2), make(4)]

    roots = build_hierarchy(tasks)

    assert [r.id for r in roots] == [4]


def test_hierarchy_ignores_stored_cycles():
    tasks = [make(1, parent=2), make(2, parent=1), make(3)]

    assert [r.id for r in build_hierarchy(tasks)] == [3]


def test_unreachable_ids_empty_for_healthy_tree():
    tasks = [make(1), make(2, parent=1), make(3, parent=2), make(4)]

    assert unreachable_task_ids(tasks) == []


def test_unreachable_ids_list_cycle_and_its_subtree():
    tasks = [make(1), make(2, parent=3), make(3, parent=2), make(4, parent=3), make(5, parent=1)]

    assert unreachable_task_ids(tasks) == [2, 3, 4]
