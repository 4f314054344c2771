"""Tests for CommentTree and CollapseState."""

from conftest import make_comment

from src.core.comment_tree import CollapseState, CommentTree, normalize_replies


def sample_tree():
    """c1 -> (c2 -> c4, c3), c5"""
    c4 = make_comment("c4", parent_id="c2")
    c2 = make_comment("c2", replies=[c4], parent_id="c1")
    c3 = make_comment("c3", parent_id="c1")
    c1 = make_comment("c1", replies=[c2, c3])
    c5 = make_comment("c5")
    return CommentTree([c1, c5])


class TestNormalizeReplies:

    def test_none_is_empty(self):
        assert normalize_replies(None) == []

    def test_order_preserved(self):
        assert normalize_replies(("a", "b")) == ["a", "b"]


class TestCommentTree:

    def test_walk_is_preorder_with_depth(self):
        visited = [(node.id, depth) for node, depth in sample_tree().walk()]
        assert visited == [("c1", 0), ("c2", 1), ("c4", 2), ("c3", 1), ("c5", 0)]

    def test_counts(self):
        tree = sample_tree()
        assert len(tree) == 2
        assert tree.total_count() == 5

    def test_find(self):
        tree = sample_tree()
        assert tree.find("c4").parent_id == "c2"
        assert tree.find("missing") is None

    def test_empty_tree(self):
        tree = CommentTree()
        assert list(tree.walk()) == []
        assert tree.total_count() == 0

    def test_equality(self):
        assert sample_tree() == sample_tree()
        assert CommentTree() != sample_tree()


class TestCollapseState:

    def test_all_expanded_initially(self):
        state = CollapseState()
        assert [n.id for n, _ in state.visible(sample_tree())] == ["c1", "c2", "c4", "c3", "c5"]

    def test_collapse_hides_subtree_but_keeps_node(self):
        state = CollapseState()
        assert state.toggle("c1") is True
        assert [n.id for n, _ in state.visible(sample_tree())] == ["c1", "c5"]

    def test_nested_flags_survive_parent_toggle(self):
        state = CollapseState()
        state.toggle("c2")
        state.toggle("c1")
        state.toggle("c1")
        assert state.is_collapsed("c2")
        assert [n.id for n, _ in state.visible(sample_tree())] == ["c1", "c2", "c3", "c5"]

    def test_toggle_twice_expands(self):
        state = CollapseState()
        state.toggle("c5")
        assert state.toggle("c5") is False
        assert not state.is_collapsed("c5")

    def test_reset_expands_everything(self):
        state = CollapseState()
        state.toggle("c1")
        state.toggle("c2")
        state.reset()
        assert state.collapsed_ids == frozenset()
