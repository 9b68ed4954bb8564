"""Component kind registry."""

from __future__ import annotations

from dataclasses import dataclass, field

from .contracts import ComponentSpec


def _key(name: str) -> str:
    return name.strip().lower()


@dataclass
class ComponentRegistry:
    """In-memory registry of component specs.

    Kind names and aliases match case-insensitively.
    """

    _specs: dict[str, ComponentSpec] = field(default_factory=dict)
    _aliases: dict[str, str] = field(default_factory=dict)

    def _claimed_by(self, key: str) -> str | None:
        """Return the kind that already answers to `key`, if any."""
        if key in self._specs:
            return key
        return self._aliases.get(key)

    def register(self, spec: ComponentSpec) -> None:
        """Add a kind and its aliases; nothing is registered if any name clashes."""
        kind = _key(spec.kind)
        if not kind:
            msg = "component kind cannot be empty."
            raise ValueError(msg)
        owner = self._claimed_by(kind)
        if owner == kind:
            msg = f"component kind '{kind}' is already registered."
            raise ValueError(msg)
        if owner is not None:
            msg = f"component kind '{kind}' conflicts with an existing alias of '{owner}'."
            raise ValueError(msg)

        alias_keys = [_key(alias) for alias in spec.aliases]
        for position, alias_key in enumerate(alias_keys):
            if not alias_key:
                msg = f"component alias cannot be empty (kind '{kind}')."
                raise ValueError(msg)
            if alias_key == kind:
                msg = f"alias '{alias_key}' duplicates component kind '{kind}'."
                raise ValueError(msg)
            if self._claimed_by(alias_key) is not None or alias_key in alias_keys[:position]:
                msg = f"component alias '{alias_key}' is already registered."
                raise ValueError(msg)

        self._specs[kind] = spec
        self._aliases.update(dict.fromkeys(alias_keys, kind))

    def register_many(self, specs: tuple[ComponentSpec, ...] | list[ComponentSpec]) -> None:
        for spec in specs:
            self.register(spec)

    def resolve_kind(self, name: str) -> str:
        kind = self._claimed_by(_key(name))
        if kind is not None:
            return kind
        valid = ", ".join(sorted(self.kinds()))
        msg = f"unknown component type '{name}'. Valid types: {valid}."
        raise ValueError(msg)

    def get(self, name: str) -> ComponentSpec:
        return self._specs[self.resolve_kind(name)]

    def list_specs(self) -> tuple[ComponentSpec, ...]:
        return tuple(self._specs.values())

    def kinds(self) -> tuple[str, ...]:
        return tuple(self._specs)
