"""Tests for conditional trees gating component rendering."""

from __future__ import annotations

import unittest

from stencil.conditional import ComponentConditional, ConditionalGroup
from stencil.errors import ConditionError


def _node(name: str, operator: str, value: str, **kwargs: object) -> ComponentConditional:
    return ComponentConditional(name=name, operator=operator, value=value, **kwargs)


class NumericConditionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.adult = ComponentConditional.from_dict({"name": "age", "operator": ">=", "value": "18"})

    def test_value_meeting_threshold_validates(self) -> None:
        self.assertTrue(self.adult.set_value("age", 18).validate())

    def test_value_below_threshold_fails(self) -> None:
        self.assertFalse(self.adult.set_value("age", 17).validate())

    def test_floats_are_accepted(self) -> None:
        self.assertTrue(self.adult.set_value("age", 18.5).validate())

    def test_unset_condition_raises_naming_variable(self) -> None:
        with self.assertRaisesRegex(ConditionError, "age"):
            self.adult.validate()

    def test_unrelated_name_leaves_node_unset(self) -> None:
        updated = self.adult.set_value("height", 180)
        self.assertFalse(updated.value_set)
        with self.assertRaises(ConditionError):
            updated.validate()

    def test_non_numeric_value_raises_and_keeps_original(self) -> None:
        for value in ("18", True, None):
            with self.subTest(value=value), self.assertRaises(ConditionError):
                self.adult.set_value("age", value)
        self.assertFalse(self.adult.value_set)

    def test_non_numeric_literal_raises(self) -> None:
        node = _node("age", "<", "eighteen")
        with self.assertRaisesRegex(ConditionError, "failed to convert conditional value to float: eighteen"):
            node.set_value("age", 3)

    def test_padded_or_underscored_literal_raises(self) -> None:
        for literal in (" 18 ", "18 ", "1_8"):
            with self.subTest(literal=literal), self.assertRaisesRegex(
                ConditionError, "failed to convert conditional value to float"
            ):
                _node("age", ">=", literal).set_value("age", 20)

    def test_operators(self) -> None:
        cases = [("==", 5, True), ("==", 6, False), ("<", 4, True), (">", 4, False), ("<=", 5, True)]
        for operator, value, expected in cases:
            with self.subTest(operator=operator, value=value):
                node = _node("n", operator, "5").set_value("n", value)
                self.assertIs(node.validate(), expected)


class StringConditionTests(unittest.TestCase):
    def test_case_insensitive_equals_ignores_case(self) -> None:
        node = _node("name", "ci_equals", "john").set_value("name", "JOHN")
        self.assertTrue(node.validated)

    def test_plain_equals_respects_case(self) -> None:
        node = _node("name", "equals", "john").set_value("name", "JOHN")
        self.assertTrue(node.value_set)
        self.assertFalse(node.validated)

    def test_string_operators(self) -> None:
        cases = [
            ("contains", "ell", "hello", True),
            ("startswith", "he", "hello", True),
            ("endswith", "lo", "hello", True),
            ("ci_contains", "ELL", "hello", True),
            ("ci_startswith", "HE", "Hello", True),
            ("ci_endswith", "x", "hello", False),
        ]
        for operator, literal, value, expected in cases:
            with self.subTest(operator=operator):
                self.assertIs(_node("s", operator, literal).set_value("s", value).validated, expected)

    def test_needle_longer_than_subject_is_false(self) -> None:
        self.assertFalse(_node("s", "startswith", "hello world").set_value("s", "hello").validated)
        self.assertFalse(_node("s", "endswith", "hello world").set_value("s", "world").validated)

    def test_non_string_value_raises(self) -> None:
        with self.assertRaises(ConditionError):
            _node("s", "equals", "1").set_value("s", 1)

    def test_negate_flips_result(self) -> None:
        node = _node("name", "equals", "john", negate=True).set_value("name", "john")
        self.assertFalse(node.validate())

    def test_unknown_operator_raises(self) -> None:
        with self.assertRaisesRegex(ConditionError, "invalid conditional operator matches"):
            _node("s", "matches", "x").set_value("s", "x")

    def test_case_insensitive_prefix_requires_string_operator(self) -> None:
        with self.assertRaises(ConditionError):
            _node("n", "ci_==", "1").set_value("n", 1)


class WildcardTests(unittest.TestCase):
    def test_fresh_wildcard_is_false(self) -> None:
        self.assertFalse(ComponentConditional().validate())

    def test_any_value_marks_wildcard_true_once(self) -> None:
        node = ComponentConditional().set_value("anything", object())
        self.assertTrue(node.value_set)
        self.assertTrue(node.validate())
        self.assertEqual(node.set_value("other", 1), node)


class GroupTests(unittest.TestCase):
    def _xor(self, root_name: str, child_name: str) -> ComponentConditional:
        child = _node(child_name, "equals", "yes")
        return _node(root_name, "equals", "yes", group=ConditionalGroup("xor", (child,)))

    def test_xor_with_exactly_one_true(self) -> None:
        tree = self._xor("a", "b").set_value("a", "yes").set_value("b", "no")
        self.assertTrue(tree.validate())
        tree = self._xor("a", "b").set_value("a", "no").set_value("b", "yes")
        self.assertTrue(tree.validate())

    def test_xor_with_both_or_neither_true(self) -> None:
        both = self._xor("a", "b").set_value("a", "yes").set_value("b", "yes")
        self.assertFalse(both.validate())
        neither = self._xor("a", "b").set_value("a", "no").set_value("b", "no")
        self.assertFalse(neither.validate())

    def test_children_are_updated_bottom_up(self) -> None:
        tree = self._xor("a", "a").set_value("a", "yes")
        self.assertTrue(tree.group.conditionals[0].validated)
        self.assertFalse(tree.validate())

    def test_combinators(self) -> None:
        cases = [
            ("and", "yes", "yes", True),
            ("and", "yes", "no", False),
            ("nand", "yes", "yes", False),
            ("or", "no", "yes", True),
            ("or", "no", "no", False),
            ("nor", "no", "no", True),
        ]
        for operator, root_value, child_value, expected in cases:
            with self.subTest(operator=operator, root=root_value, child=child_value):
                child = _node("b", "equals", "yes")
                tree = _node("a", "equals", "yes", group=ConditionalGroup(operator, (child,)))
                tree = tree.set_value("a", root_value).set_value("b", child_value)
                self.assertIs(tree.validate(), expected)

    def test_unset_child_raises(self) -> None:
        child = _node("b", "equals", "yes")
        tree = _node("a", "equals", "yes", group=ConditionalGroup("and", (child,))).set_value("a", "yes")
        with self.assertRaisesRegex(ConditionError, "without setting b"):
            tree.validate()

    def test_unknown_group_operator_raises(self) -> None:
        child = _node("b", "equals", "yes")
        tree = _node("a", "equals", "yes", group=ConditionalGroup("implies", (child,)))
        tree = tree.set_value("a", "yes").set_value("b", "yes")
        with self.assertRaisesRegex(ConditionError, "invalid group operator implies"):
            tree.validate()

    def test_child_error_keeps_original_tree(self) -> None:
        child = _node("b", "==", "1")
        tree = _node("a", "equals", "yes", group=ConditionalGroup("and", (child,)))
        with self.assertRaises(ConditionError):
            tree.set_value("b", "not a number")
        self.assertFalse(tree.group.conditionals[0].value_set)


class FromDictTests(unittest.TestCase):
    def test_nested_document(self) -> None:
        tree = ComponentConditional.from_dict(
            {
                "name": "user",
                "boolNot": True,
                "operator": "equals",
                "value": "admin",
                "group": {
                    "groupOperator": "or",
                    "conditionals": [
                        {"name": "age", "operator": ">", "value": "65"},
                        {"name": "", "operator": "", "value": ""},
                    ],
                },
            }
        )
        self.assertTrue(tree.negate)
        self.assertEqual(tree.group.operator, "or")
        self.assertEqual(len(tree.group.conditionals), 2)
        self.assertEqual(tree.named_properties(), frozenset({"user", "age"}))

    def test_missing_conditional_is_wildcard(self) -> None:
        self.assertEqual(ComponentConditional.from_dict(None), ComponentConditional())
        self.assertEqual(ComponentConditional.from_dict({}).named_properties(), frozenset())

    def test_non_object_raises(self) -> None:
        with self.assertRaises(ConditionError):
            ComponentConditional.from_dict(["name"])

    def test_null_fields_read_as_empty(self) -> None:
        tree = ComponentConditional.from_dict(
            {"name": None, "operator": None, "value": None, "boolNot": None, "group": {"groupOperator": None}}
        )
        self.assertEqual((tree.name, tree.operator, tree.value, tree.group.operator), ("", "", "", ""))
        self.assertFalse(tree.negate)
        self.assertEqual(tree.named_properties(), frozenset())
        self.assertTrue(tree.set_value("anything", 1).validate())

    def test_numeric_value_is_kept_as_text(self) -> None:
        tree = ComponentConditional.from_dict({"name": "n", "operator": "==", "value": 0})
        self.assertEqual(tree.value, "0")
        self.assertTrue(tree.set_value("n", 0).validate())

    def test_non_bool_negate_raises(self) -> None:
        for flag in ("false", "true", 0, 1):
            with self.subTest(flag=flag), self.assertRaisesRegex(ConditionError, "boolNot must be true or false"):
                ComponentConditional.from_dict({"name": "a", "operator": "equals", "value": "b", "boolNot": flag})


if __name__ == "__main__":
    unittest.main()
