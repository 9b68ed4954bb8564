"""Error types raised while loading, resolving and rendering templates."""

from __future__ import annotations

from typing import Any


class TemplateError(ValueError):
    """Base class for template failures.

    `partial` carries whatever state was committed before the failure when
    the raising operation has partial-effect semantics (variable apply and
    the render pass). It is `None` everywhere else.
    """

    def __init__(self, message: str, *, partial: Any = None) -> None:
        super().__init__(message)
        self.partial = partial


class ParseError(TemplateError):
    """Malformed variable reference syntax or an empty field."""


class CompositeUnsupportedError(TemplateError):
    """A field mixes literal text with variables, or holds several variables."""


class CoercionError(TemplateError):
    """Literal field text does not match the expected property kind."""


class ExclusivityError(TemplateError):
    """Zero or more than one of an exclusive set of fields was set."""


class SetterError(TemplateError):
    """A component rejected the runtime type of a variable value."""


class ConditionError(TemplateError):
    """Unknown operator or combinator, unset condition, or bad numeric literal."""


class IterationExceededError(TemplateError):
    """The text fit loop ran out of tries."""


class ComponentError(TemplateError):
    """Unknown component kind, malformed properties, or a failed draw."""


class BackgroundError(TemplateError):
    """Invalid base image configuration."""


class CanvasError(TemplateError):
    """The drawing surface rejected a primitive."""
