"""
Tests for Permission construction, serialization and algebra.
"""
import json
from uuid import uuid4

import pytest
import yaml

from permset import Permission
from permset.errors import (
    IncompatibleScopeError,
    InvalidJsonError,
    InvalidYamlError,
    MalformedTreeError,
    TooDeepError,
    UnsupportedFormatError,
)

from conftest import BUILDING_ACTIONS, BUILDING_TREE, nested_tree


class TestConstruction:
    """Test the permission constructors."""

    def test_from_actions(self):
        actions = {"create", "view"}
        perm = Permission.from_actions(actions)
        assert perm.actions == actions
        assert not perm.is_scoped()

    def test_from_actions_copies_input(self):
        actions = {"create", "view"}
        perm = Permission.from_actions(actions)
        actions.add("delete")
        assert perm.actions == {"create", "view"}

    def test_actions_are_read_only(self):
        perm = Permission.from_actions({"create"})
        assert isinstance(perm.actions, frozenset)
        with pytest.raises(AttributeError):
            perm.actions = frozenset()

    def test_from_actions_with_scope(self):
        perm = Permission.from_actions({"create"}, uuid4())
        assert perm.is_scoped()

    def test_from_json(self, building_json):
        assert Permission.from_json(building_json).actions == BUILDING_ACTIONS

    def test_from_json_leaves_out_false_actions(self):
        perm = Permission.from_json('{"user": {"create": true, "delete": false}}')
        assert perm.actions == {"user.create"}

    def test_from_json_invalid_json(self):
        with pytest.raises(InvalidJsonError, match="wrong format in permission json string"):
            Permission.from_json('{"create": true')

    @pytest.mark.parametrize("document", ["[]", "true", "3", '"create"', "null"])
    def test_from_json_root_must_be_object(self, document):
        with pytest.raises(MalformedTreeError, match="root must be an object"):
            Permission.from_json(document)

    def test_from_json_bad_leaf(self):
        with pytest.raises(MalformedTreeError):
            Permission.from_json('{"user": {"create": "yes"}}')

    def test_from_json_depth_boundary(self):
        Permission.from_json(json.dumps(nested_tree(19)))
        with pytest.raises(TooDeepError):
            Permission.from_json(json.dumps(nested_tree(20)))

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            Permission.from_json("not json")

    def test_from_yaml(self):
        document = yaml.safe_dump(BUILDING_TREE)
        assert Permission.from_yaml(document).actions == BUILDING_ACTIONS

    def test_from_yaml_invalid(self):
        with pytest.raises(InvalidYamlError):
            Permission.from_yaml("user: {create: true")

    def test_from_yaml_empty_document(self):
        with pytest.raises(MalformedTreeError):
            Permission.from_yaml("")

    def test_from_json_beyond_parser_recursion(self):
        document = '{"a":' * 100000 + 'true' + '}' * 100000
        with pytest.raises(TooDeepError):
            Permission.from_json(document)

    def test_from_yaml_beyond_parser_recursion(self):
        document = '{a: ' * 5000 + 'true' + '}' * 5000
        with pytest.raises(TooDeepError):
            Permission.from_yaml(document)

    def test_from_yaml_on_off_yes_no_are_names(self):
        perm = Permission.from_yaml("light:\n  on: true\n  off: true\nanswer:\n  yes: true\n  no: false\n")
        assert perm.actions == {"light.on", "light.off", "answer.yes"}

    def test_from_yaml_on_off_names_round_trip(self):
        perm = Permission.from_actions({"light.on", "light.off"})
        assert Permission.from_yaml(perm.to_yaml()) == perm

    def test_from_yaml_yes_is_not_a_boolean_leaf(self):
        with pytest.raises(MalformedTreeError):
            Permission.from_yaml("user:\n  create: yes\n")

    def test_from_file_json(self, tmp_path, building_json):
        path = tmp_path / "perm.json"
        path.write_text(building_json)
        assert Permission.from_file(path).actions == BUILDING_ACTIONS

    def test_from_file_yaml(self, tmp_path):
        path = tmp_path / "perm.yml"
        path.write_text("user:\n  create: true\n  delete: false\n")
        assert Permission.from_file(path).actions == {"user.create"}

    def test_from_file_unknown_suffix(self, tmp_path):
        path = tmp_path / "perm.txt"
        path.write_text("{}")
        with pytest.raises(UnsupportedFormatError, match="unsupported permission file format"):
            Permission.from_file(path)

    def test_from_file_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Permission.from_file(tmp_path / "missing.json")


class TestSerialization:
    """Test JSON and YAML output."""

    def test_to_json_round_trip(self, building_json):
        perm = Permission.from_json(building_json)
        assert json.loads(perm.to_json()) == BUILDING_TREE
        assert Permission.from_json(perm.to_json()) == perm

    def test_to_json_only_true_leaves(self):
        perm = Permission.from_json('{"user": {"create": true, "delete": false}}')
        assert json.loads(perm.to_json()) == {"user": {"create": True}}

    def test_to_json_is_sorted(self):
        perm = Permission.from_actions({"view", "create"})
        assert perm.to_json() == '{"create": true, "view": true}'

    def test_to_yaml_round_trip(self):
        perm = Permission.from_actions(BUILDING_ACTIONS)
        assert yaml.safe_load(perm.to_yaml()) == BUILDING_TREE
        assert Permission.from_yaml(perm.to_yaml()) == perm

    def test_to_tree(self):
        assert Permission.from_actions(BUILDING_ACTIONS).to_tree() == BUILDING_TREE

    def test_repr_hides_scope(self):
        scope = uuid4()
        perm = Permission.from_actions({"create"}, scope)
        assert str(scope) not in repr(perm)
        assert "create" in repr(perm)


class TestScope:
    """Test scope compatibility."""

    def test_unscoped_share_scope(self):
        assert Permission.from_actions({"a"}).same_scope(Permission.from_actions({"b"}))

    def test_equal_scopes(self):
        scope = uuid4()
        first = Permission.from_actions({"a"}, scope)
        second = Permission.from_actions({"b"}, scope)
        assert first.same_scope(second)

    def test_different_scopes(self):
        first = Permission.from_actions({"a"}, uuid4())
        second = Permission.from_actions({"a"}, uuid4())
        assert not first.same_scope(second)

    def test_scoped_and_unscoped(self):
        scoped = Permission.from_actions({"a"}, uuid4())
        unscoped = Permission.from_actions({"a"})
        assert not scoped.same_scope(unscoped)
        assert not unscoped.same_scope(scoped)

    @pytest.mark.parametrize("operation", ["union", "difference", "contains"])
    def test_operations_reject_different_scopes(self, operation):
        scoped = Permission.from_actions({"a"}, uuid4())
        unscoped = Permission.from_actions({"a"})
        with pytest.raises(IncompatibleScopeError, match=operation):
            getattr(scoped, operation)(unscoped)
        with pytest.raises(IncompatibleScopeError):
            getattr(unscoped, operation)(scoped)

    @pytest.mark.parametrize("operation", ["union", "difference", "contains"])
    def test_operations_reject_other_managers(self, operation):
        first = Permission.from_actions({"a"}, uuid4())
        second = Permission.from_actions({"a"}, uuid4())
        with pytest.raises(IncompatibleScopeError):
            getattr(first, operation)(second)

    def test_contains_action_ignores_scope(self):
        perm = Permission.from_actions({"a"}, uuid4())
        assert perm.contains_action("a")
        assert not perm.contains_action("b")


class TestAlgebra:
    """Test union, difference and containment."""

    def test_union(self):
        first = Permission.from_actions({"create", "view"})
        second = Permission.from_actions({"view", "edit"})
        assert first.union(second).actions == {"create", "view", "edit"}

    def test_union_keeps_scope(self):
        scope = uuid4()
        first = Permission.from_actions({"create"}, scope)
        second = Permission.from_actions({"view"}, scope)
        assert first.union(second).same_scope(first)
        assert first.union(second).is_scoped()

    def test_union_is_idempotent(self):
        perm = Permission.from_actions({"create", "view"}, uuid4())
        assert perm.union(perm) == perm

    def test_union_contains_both(self):
        first = Permission.from_actions({"create", "view"})
        second = Permission.from_actions({"edit"})
        union = first.union(second)
        assert union.contains(first)
        assert union.contains(second)

    def test_operations_do_not_mutate(self):
        first = Permission.from_actions({"create", "view"})
        second = Permission.from_actions({"view", "edit"})
        first.union(second)
        first.difference(second)
        assert first.actions == {"create", "view"}
        assert second.actions == {"view", "edit"}

    def test_difference(self):
        first = Permission.from_actions({"create", "view", "edit"})
        second = Permission.from_actions({"create", "view"})
        assert first.difference(second).actions == {"edit"}

    def test_difference_excludes_other(self):
        first = Permission.from_actions({"create", "view"})
        second = Permission.from_actions({"view"})
        assert not first.difference(second).contains(second)

    def test_difference_with_empty(self):
        first = Permission.from_actions({"create"})
        empty = Permission.from_actions(set())
        assert first.difference(empty).contains(empty)

    def test_contains(self):
        bigger = Permission.from_actions({"create", "view"})
        smaller = Permission.from_actions({"create"})
        assert bigger.contains(smaller)
        assert not smaller.contains(bigger)

    def test_contains_is_reflexive(self):
        perm = Permission.from_actions({"create", "view"})
        assert perm.contains(perm)

    def test_contains_action(self):
        perm = Permission.from_actions({"create", "view"})
        assert perm.contains_action("create")
        assert not perm.contains_action("other")


class TestOperators:
    """Test the operator shortcuts."""

    def test_operators_match_methods(self):
        first = Permission.from_actions({"create", "view"})
        second = Permission.from_actions({"view"})
        assert first | second == first.union(second)
        assert first - second == first.difference(second)
        assert first >= second
        assert not second >= first

    def test_operators_check_scope(self):
        scoped = Permission.from_actions({"a"}, uuid4())
        unscoped = Permission.from_actions({"a"})
        with pytest.raises(IncompatibleScopeError):
            scoped | unscoped

    def test_membership(self):
        perm = Permission.from_actions({"create"})
        assert "create" in perm
        assert "view" not in perm
        assert 3 not in perm

    def test_len_and_iteration(self):
        perm = Permission.from_actions({"view", "create"})
        assert len(perm) == 2
        assert list(perm) == ["create", "view"]

    def test_equality_includes_scope(self):
        assert Permission.from_actions({"a"}) == Permission.from_actions({"a"})
        assert Permission.from_actions({"a"}, uuid4()) != Permission.from_actions({"a"})

    def test_hashable(self):
        perms = {Permission.from_actions({"a"}), Permission.from_actions({"a"})}
        assert len(perms) == 1
