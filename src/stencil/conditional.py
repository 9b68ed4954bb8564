"""Boolean conditions that decide whether a component is rendered.

A condition compares one named variable against a literal. String operators
are `equals`, `contains`, `startswith`, `endswith` and their case-insensitive
`ci_` variants. Numeric operators are `==`, `<`, `>`, `<=` and `>=`. A node
may carry a group of child conditions combined with `and`, `or`, `nand`,
`nor` or `xor`.
"""

from __future__ import annotations

import logging
import operator
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from .errors import ConditionError

logger = logging.getLogger(__name__)

STRING_OPERATORS: dict[str, Callable[[str, str], bool]] = {
    "equals": lambda subject, expected: subject == expected,
    "contains": lambda subject, expected: expected in subject,
    # Expected text longer than the subject never matches.
    "startswith": lambda subject, expected: len(expected) <= len(subject) and subject.startswith(expected),
    "endswith": lambda subject, expected: len(expected) <= len(subject) and subject.endswith(expected),
}
CASE_INSENSITIVE_PREFIX = "ci_"
NUMERIC_OPERATORS: dict[str, Callable[[float, float], bool]] = {
    "==": operator.eq,
    "<": operator.lt,
    ">": operator.gt,
    "<=": operator.le,
    ">=": operator.ge,
}
GROUP_OPERATORS = ("and", "or", "nand", "nor", "xor")


def _text(data: Mapping[str, Any], key: str) -> str:
    raw = data.get(key)
    return "" if raw is None else str(raw)


@dataclass(frozen=True)
class ConditionalGroup:
    """Child conditions combined with the parent node by `operator`."""

    operator: str = ""
    conditionals: tuple[ComponentConditional, ...] = ()


@dataclass(frozen=True)
class ComponentConditional:
    """One node of a condition tree.

    `value_set` and `validated` are runtime flags. They change only through
    `set_value`, which returns a new tree.
    """

    name: str = ""
    negate: bool = False
    operator: str = ""
    value: str = ""
    group: ConditionalGroup = field(default_factory=ConditionalGroup)
    value_set: bool = False
    validated: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ComponentConditional:
        """Build a tree from the template's conditional object."""
        if not data:
            return cls()
        if not isinstance(data, Mapping):
            msg = "conditional must be a JSON object."
            raise ConditionError(msg)
        raw_group = data.get("group") or {}
        if not isinstance(raw_group, Mapping):
            msg = "conditional group must be a JSON object."
            raise ConditionError(msg)
        negate = data.get("boolNot")
        if negate is None:
            negate = False
        if not isinstance(negate, bool):
            msg = f"conditional boolNot must be true or false: {negate!r}"
            raise ConditionError(msg)
        children = tuple(cls.from_dict(child) for child in raw_group.get("conditionals") or ())
        return cls(
            name=_text(data, "name"),
            negate=negate,
            operator=_text(data, "operator"),
            value=_text(data, "value"),
            group=ConditionalGroup(
                operator=_text(raw_group, "groupOperator"),
                conditionals=children,
            ),
        )

    def set_value(self, name: str, value: Any) -> ComponentConditional:
        """Evaluate every node named `name` against `value`.

        Children are updated first. A wildcard node (empty name) is marked
        true by the first value it sees, whatever its name.
        """
        children = tuple(child.set_value(name, value) for child in self.group.conditionals)
        updated = replace(self, group=replace(self.group, conditionals=children))

        if not self.name and not self.value_set:
            return replace(updated, value_set=True, validated=True)
        if self.name != name:
            return updated

        result = self._evaluate(value)
        if self.negate:
            result = not result
        logger.debug("condition %s %s %r evaluated to %s", self.name, self.operator, self.value, result)
        return replace(updated, value_set=True, validated=result)

    def _evaluate(self, value: Any) -> bool:
        base_operator = self.operator
        case_insensitive = base_operator.startswith(CASE_INSENSITIVE_PREFIX)
        if case_insensitive:
            base_operator = base_operator[len(CASE_INSENSITIVE_PREFIX) :]

        if base_operator in STRING_OPERATORS:
            if not isinstance(value, str):
                msg = f"invalid value for string operator: {value!r}"
                raise ConditionError(msg)
            subject, expected = value, self.value
            if case_insensitive:
                subject, expected = subject.lower(), expected.lower()
            return STRING_OPERATORS[base_operator](subject, expected)

        if not case_insensitive and base_operator in NUMERIC_OPERATORS:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                msg = f"invalid value for float operator: {value!r}"
                raise ConditionError(msg)
            msg = f"failed to convert conditional value to float: {self.value}"
            if self.value != self.value.strip() or "_" in self.value:
                raise ConditionError(msg)
            try:
                literal = float(self.value)
            except ValueError as exc:
                raise ConditionError(msg) from exc
            return NUMERIC_OPERATORS[base_operator](float(value), literal)

        msg = f"invalid conditional operator {self.operator}"
        raise ConditionError(msg)

    def validate(self) -> bool:
        """Return whether the whole tree passes.

        Raises when a named node reachable from here never received a value.
        """
        if self.name and not self.value_set:
            msg = (
                f"attempted to validate conditional {self.name} {self.operator} {self.value} "
                f"without setting {self.name}"
            )
            raise ConditionError(msg)

        children = self.group.conditionals
        if not children:
            return self.validated

        group_operator = self.group.operator
        if group_operator == "xor":
            # Exactly one of this node and its children may be true.
            true_count = int(self.validated)
            for child in children:
                if child.validate():
                    true_count += 1
            return true_count == 1

        if group_operator in {"and", "nand"}:
            result = self.validated
            for child in children:
                result = child.validate() and result
            return not result if group_operator == "nand" else result

        if group_operator in {"or", "nor"}:
            result = self.validated
            for child in children:
                result = child.validate() or result
            return not result if group_operator == "nor" else result

        msg = f"invalid group operator {group_operator}"
        raise ConditionError(msg)

    def named_properties(self) -> frozenset[str]:
        """Return every variable name referenced anywhere in the tree."""
        names = {self.name} if self.name else set()
        for child in self.group.conditionals:
            names |= child.named_properties()
        return frozenset(names)
