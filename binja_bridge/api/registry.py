"""Immutable operation definitions and the registry that holds them."""
from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

Handler = Callable[..., str]


@dataclass(frozen=True)
class ArgumentSpec:
    """One published argument of an operation."""

    name: str
    annotation: Any
    required: bool
    default: Any = None


@dataclass(frozen=True)
class OperationDefinition:
    """A named tool: description, handler and its argument schema.

    ``arguments`` is derived from the handler signature, skipping the leading
    ``client`` parameter that is injected at dispatch time.
    """

    name: str
    description: str
    handler: Handler
    arguments: Tuple[ArgumentSpec, ...]

    @classmethod
    def from_handler(cls, name: str, description: str, handler: Handler) -> "OperationDefinition":
        params = list(inspect.signature(handler).parameters.values())
        if not params or params[0].name != "client":
            raise TypeError(f"handler for {name!r} must accept a leading client parameter")
        arguments: List[ArgumentSpec] = []
        for param in params[1:]:
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                raise TypeError(f"handler for {name!r} may not take *args or **kwargs")
            required = param.default is inspect.Parameter.empty
            arguments.append(
                ArgumentSpec(
                    name=param.name,
                    annotation=param.annotation,
                    required=required,
                    default=None if required else param.default,
                )
            )
        return cls(name=name, description=description, handler=handler, arguments=tuple(arguments))

    def argument(self, name: str) -> ArgumentSpec:
        for spec in self.arguments:
            if spec.name == name:
                return spec
        raise KeyError(name)


class OperationRegistry:
    """Ordered, name-unique collection of operations, read-only once frozen."""

    def __init__(self) -> None:
        self._operations: Dict[str, OperationDefinition] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, name: str, description: str, handler: Handler) -> OperationDefinition:
        if self._frozen:
            raise RuntimeError(f"registry is frozen; cannot register {name!r}")
        if name in self._operations:
            raise ValueError(f"operation {name!r} is already registered")
        definition = OperationDefinition.from_handler(name, description, handler)
        self._operations[name] = definition
        return definition

    def operation(self, name: str, description: str) -> Callable[[Handler], Handler]:
        """Decorator form of :meth:`register` returning the handler unchanged."""

        def decorator(handler: Handler) -> Handler:
            self.register(name, description, handler)
            return handler

        return decorator

    def freeze(self) -> "OperationRegistry":
        self._frozen = True
        return self

    def get(self, name: str) -> Optional[OperationDefinition]:
        return self._operations.get(name)

    def names(self) -> List[str]:
        return list(self._operations)

    def __iter__(self) -> Iterator[OperationDefinition]:
        return iter(list(self._operations.values()))

    def __len__(self) -> int:
        return len(self._operations)

    def __contains__(self, name: object) -> bool:
        return name in self._operations


__all__ = ["ArgumentSpec", "Handler", "OperationDefinition", "OperationRegistry"]
