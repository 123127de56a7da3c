"""
Tests for path-addressed condition tree edits.

Validates that:
1. Lookups return None for paths that address nothing
2. Every edit is copy-on-write (old roots stay valid snapshots)
3. Multi-path edits are independent of the order paths are given in
4. Moves, grouping and ungrouping keep the set of conditions intact
5. Contract violations raise InvalidPathError / InvalidGroupSizeError
"""

import pytest

from strategy_conditions.conditions import (
    ConditionTreeError,
    GroupCondition,
    InvalidGroupSizeError,
    InvalidPathError,
    condition_to_dict,
    duplicate_many,
    find_path,
    get_all_condition_paths,
    get_all_groups,
    get_at,
    group,
    insert_at,
    is_valid_drop,
    iter_nodes,
    move_to,
    prune_empty_groups,
    remove_many,
    set_at,
    ungroup,
)


def ids(nodes):
    return [node.id for node in nodes]


def leaf_ids(root):
    return sorted(node.id for _, node in iter_nodes(root) if not isinstance(node, GroupCondition))


class TestLookup:
    """Test read-only path helpers."""

    def test_get_at(self, sample_tree):
        assert get_at(sample_tree, ()) is sample_tree
        assert get_at(sample_tree, (1, 1)).id == "c11"

    @pytest.mark.parametrize("path", [(3,), (-1,), (1, 2), (0, 0)])
    def test_get_at_missing(self, sample_tree, path):
        """Out-of-range indices and indexing into a condition give None."""
        assert get_at(sample_tree, path) is None

    def test_all_condition_paths_in_document_order(self, sample_tree):
        assert get_all_condition_paths(sample_tree) == [(0,), (1,), (1, 0), (1, 1), (2,)]

    def test_all_groups_excludes_root(self, sample_tree):
        assert get_all_groups(sample_tree) == [{"path": (1,), "label": "OR Group (2 items)"}]

    def test_find_path(self, sample_tree):
        assert find_path(sample_tree, "c11") == (1, 1)
        assert find_path(sample_tree, "root") == ()
        assert find_path(sample_tree, "missing") is None


class TestSingleEdits:
    """Test set_at and insert_at."""

    def test_set_at_shares_untouched_subtrees(self, sample_tree, condition_factory):
        result = set_at(sample_tree, (1, 0), condition_factory("new"))
        assert get_at(result, (1, 0)).id == "new"
        assert result.conditions[0] is sample_tree.conditions[0]
        assert result.conditions[2] is sample_tree.conditions[2]
        assert get_at(sample_tree, (1, 0)).id == "c10"

    def test_set_at_root_requires_group(self, sample_tree, condition_factory):
        with pytest.raises(InvalidPathError, match="root must be"):
            set_at(sample_tree, (), condition_factory("new"))

    def test_set_at_root_replaces_tree(self, sample_tree):
        replacement = GroupCondition("other", "OR")
        assert set_at(sample_tree, (), replacement) is replacement

    def test_set_at_invalid_path(self, sample_tree, condition_factory):
        with pytest.raises(InvalidPathError) as exc_info:
            set_at(sample_tree, (4,), condition_factory("new"))
        assert exc_info.value.path == (4,)
        assert isinstance(exc_info.value, LookupError)

    def test_insert_at(self, sample_tree, condition_factory):
        result = insert_at(sample_tree, (1,), 2, condition_factory("new"))
        assert ids(get_at(result, (1,)).conditions) == ["c10", "c11", "new"]

    def test_insert_at_index_out_of_range(self, sample_tree, condition_factory):
        with pytest.raises(InvalidPathError, match="out of range"):
            insert_at(sample_tree, (1,), 3, condition_factory("new"))

    def test_insert_into_condition(self, sample_tree, condition_factory):
        with pytest.raises(InvalidPathError, match="not a group"):
            insert_at(sample_tree, (0,), 0, condition_factory("new"))


class TestRemoveAndDuplicate:
    """Test remove_many and duplicate_many."""

    def test_remove_many(self, sample_tree):
        result = remove_many(sample_tree, [(0,), (1, 1)])
        assert ids(result.conditions) == ["g1", "c2"]
        assert ids(get_at(result, (0,)).conditions) == ["c10"]

    def test_remove_order_independent(self, sample_tree):
        assert remove_many(sample_tree, [(0,), (2,)]) == remove_many(sample_tree, [(2,), (0,)])

    def test_remove_leaves_snapshot_intact(self, sample_tree):
        before = condition_to_dict(sample_tree)
        remove_many(sample_tree, [(1,)])
        assert condition_to_dict(sample_tree) == before

    def test_remove_keeps_empty_group_by_default(self, sample_tree):
        result = remove_many(sample_tree, [(1, 0), (1, 1)])
        assert get_at(result, (1,)).is_empty

    def test_remove_prunes_when_asked(self, sample_tree):
        result = remove_many(sample_tree, [(1, 0), (1, 1)], prune_empty=True)
        assert ids(result.conditions) == ["c0", "c2"]

    def test_remove_prunes_from_config(self, sample_tree, monkeypatch):
        monkeypatch.setenv("CONDITIONS_PRUNE_EMPTY_GROUPS", "true")
        result = remove_many(sample_tree, [(1, 0), (1, 1)])
        assert ids(result.conditions) == ["c0", "c2"]

    def test_remove_root_raises(self, sample_tree):
        with pytest.raises(InvalidPathError, match="root"):
            remove_many(sample_tree, [()])

    def test_remove_validates_all_paths_first(self, sample_tree):
        with pytest.raises(InvalidPathError):
            remove_many(sample_tree, [(0,), (9,)])

    def test_duplicate_many(self, sample_tree):
        result = duplicate_many(sample_tree, [(1, 0), (0,)])
        assert len(result.conditions) == 4
        copy, original = result.conditions[1], result.conditions[0]
        assert copy.id != original.id
        assert copy.lhs == original.lhs and copy.rhs == original.rhs
        inner = get_at(result, (2,))
        assert inner.id == "g1"
        assert len(inner.conditions) == 3
        assert inner.conditions[1].rhs == inner.conditions[0].rhs
        assert inner.conditions[1].id != "c10"

    def test_duplicate_group_gets_fresh_ids(self, sample_tree):
        result = duplicate_many(sample_tree, [(1,)])
        clone = get_at(result, (2,))
        assert clone.id != "g1"
        assert not set(ids(clone.conditions)) & {"c10", "c11"}
        assert len(clone.conditions) == 2


class TestMove:
    """Test is_valid_drop and move_to."""

    @pytest.mark.parametrize("sources,target,position,expected", [
        ([(0,)], (1,), "inside", True),
        ([(0,)], (), "inside", True),
        ([(0,)], (2,), "after", True),
        ([], (1,), "inside", False),
        ([(1,)], (1,), "inside", False),
        ([(1,)], (1, 0), "before", False),
        ([(0,)], (), "before", False),
        ([(0,)], (2,), "sideways", False),
    ])
    def test_is_valid_drop(self, sources, target, position, expected):
        assert is_valid_drop(sources, target, position) is expected

    def test_move_inside_group(self, sample_tree):
        result = move_to(sample_tree, [(0,)], (1,), "inside")
        assert ids(result.conditions) == ["g1", "c2"]
        assert ids(get_at(result, (0,)).conditions) == ["c10", "c11", "c0"]

    def test_move_before(self, sample_tree):
        result = move_to(sample_tree, [(2,)], (0,), "before")
        assert ids(result.conditions) == ["c2", "c0", "g1"]

    def test_move_several_keeps_document_order(self, sample_tree):
        result = move_to(sample_tree, [(2,), (0,)], (1, 1), "after")
        assert ids(result.conditions) == ["g1"]
        assert ids(get_at(result, (0,)).conditions) == ["c10", "c11", "c0", "c2"]

    def test_move_out_of_group(self, sample_tree):
        result = move_to(sample_tree, [(1, 0)], (0,), "after")
        assert ids(result.conditions) == ["c0", "c10", "g1", "c2"]
        assert ids(get_at(result, (2,)).conditions) == ["c11"]

    def test_invalid_drop_is_noop(self, sample_tree):
        assert move_to(sample_tree, [(1,)], (1, 0), "inside") is sample_tree

    def test_move_missing_source_raises(self, sample_tree):
        with pytest.raises(InvalidPathError):
            move_to(sample_tree, [(7,)], (0,), "before")

    def test_move_inside_condition_raises(self, sample_tree):
        with pytest.raises(InvalidPathError, match="not a group"):
            move_to(sample_tree, [(2,)], (0,), "inside")

    def test_move_preserves_conditions(self, sample_tree):
        result = move_to(sample_tree, [(1, 1), (2,)], (0,), "before")
        assert leaf_ids(result) == leaf_ids(sample_tree)


class TestGrouping:
    """Test group, ungroup and prune_empty_groups."""

    def test_group_at_first_selected(self, sample_tree):
        result = group(sample_tree, [(2,), (0,)], "OR")
        wrapper = result.conditions[0]
        assert wrapper.group_logic == "OR"
        assert ids(wrapper.conditions) == ["c0", "c2"]
        assert ids(result.conditions)[1:] == ["g1"]

    def test_group_across_levels(self, sample_tree):
        result = group(sample_tree, [(1, 0), (2,)])
        assert ids(result.conditions) == ["c0", "g1"]
        inner = get_at(result, (1,))
        assert ids(get_at(inner, (0,)).conditions) == ["c10", "c2"]
        assert inner.conditions[1].id == "c11"

    def test_group_requires_two_nodes(self, sample_tree):
        with pytest.raises(InvalidGroupSizeError) as exc_info:
            group(sample_tree, [(0,)])
        assert exc_info.value.count == 1
        assert isinstance(exc_info.value, ConditionTreeError)

    def test_group_counts_nested_selection_once(self, sample_tree):
        """A node selected together with its ancestor is not a second member."""
        with pytest.raises(InvalidGroupSizeError):
            group(sample_tree, [(1,), (1, 0)])

    def test_group_root_raises(self, sample_tree):
        with pytest.raises(InvalidPathError):
            group(sample_tree, [(), (0,)])

    def test_ungroup(self, sample_tree):
        result = ungroup(sample_tree, [(1,)])
        assert ids(result.conditions) == ["c0", "c10", "c11", "c2"]

    def test_group_then_ungroup_restores_conditions(self, sample_tree):
        grouped = group(sample_tree, [(0,), (2,)])
        restored = ungroup(grouped, [(0,)])
        assert leaf_ids(restored) == leaf_ids(sample_tree)
        assert ids(restored.conditions) == ["c0", "c2", "g1"]

    def test_ungroup_condition_raises(self, sample_tree):
        with pytest.raises(InvalidPathError, match="not a group"):
            ungroup(sample_tree, [(0,)])

    def test_ungroup_root_raises(self, sample_tree):
        with pytest.raises(InvalidPathError, match="root"):
            ungroup(sample_tree, [()])

    def test_prune_nested_empty_groups(self, condition_factory):
        root = GroupCondition("root", "AND", (
            condition_factory("c0"),
            GroupCondition("outer", "OR", (GroupCondition("inner", "AND"),)),
        ))
        assert ids(prune_empty_groups(root).conditions) == ["c0"]

    def test_prune_keeps_root(self):
        root = GroupCondition("root", "AND", (GroupCondition("inner", "OR"),))
        result = prune_empty_groups(root)
        assert result.id == "root"
        assert result.is_empty

    def test_prune_without_empty_groups_is_identity(self, sample_tree):
        assert prune_empty_groups(sample_tree) is sample_tree


class TestCommutation:
    """Disjoint removals and duplications give the same tree in either order."""

    @staticmethod
    def shape(node):
        if isinstance(node, GroupCondition):
            return node.group_logic, [TestCommutation.shape(child) for child in node.conditions]
        return node.rhs.value

    def test_remove_then_duplicate(self, sample_tree):
        removed_first = duplicate_many(remove_many(sample_tree, [(0,)]), [(1,)])
        duplicated_first = remove_many(duplicate_many(sample_tree, [(2,)]), [(0,)])
        assert self.shape(removed_first) == self.shape(duplicated_first)
        assert self.shape(removed_first) == ("AND", [("OR", [10, 11]), 2, 2])
