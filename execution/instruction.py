"""Instruction - one unit of remote work

Created by the connection layer per request, consumed exactly once by the
InstructionExecutor.

Two shapes:
- An action callable, called with the resource (sync or async)
- A payload dict: {"type": "call" | "get" | "set", "name": ..., "value": ...,
  "catched": bool}, applied to the resource
"""

import inspect
from typing import Any, Callable, Dict, Optional

from core.exceptions import InstructionError


TYPE_CALL = "call"
TYPE_GET = "get"
TYPE_SET = "set"

INSTRUCTION_TYPES = (TYPE_CALL, TYPE_GET, TYPE_SET)


class Instruction:
    """Opaque instruction with an action, an error-catching flag and a
    default resource binding."""

    def __init__(
        self,
        action: Optional[Callable[[Any], Any]] = None,
        *,
        catch_errors: bool = False,
        type: Optional[str] = None,
        name: Optional[str] = None,
        value: Any = None,
        resource: Any = None,
    ):
        if action is None and type is None:
            raise InstructionError("Instruction needs an action or a type")
        if type is not None and type not in INSTRUCTION_TYPES:
            raise InstructionError(f"Unknown instruction type: {type}")
        if type is not None and not name:
            raise InstructionError(f"Instruction of type '{type}' needs a name")

        self._action = action
        self._catch_errors = bool(catch_errors)
        self.type = type
        self.name = name
        self.value = value
        self.resource = resource
        self._default_resource: Any = None
        self._consumed = False

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Instruction":
        """Build an instruction from its decoded request payload."""
        if not isinstance(payload, dict):
            raise InstructionError("Instruction payload must be an object")
        return cls(
            type=payload.get("type"),
            name=payload.get("name"),
            value=payload.get("value"),
            catch_errors=bool(payload.get("catched", False)),
        )

    def set_default_resource(self, resource: Any) -> None:
        self._default_resource = resource

    def should_catch_errors(self) -> bool:
        return self._catch_errors

    def _target(self) -> Any:
        target = self.resource if self.resource is not None else self._default_resource
        if target is None:
            raise InstructionError("No resource to execute the instruction against")
        return target

    async def execute(self) -> Any:
        """Run the instruction once and return its value (possibly None)."""
        if self._consumed:
            raise InstructionError("Instruction already executed")
        self._consumed = True

        target = self._target()

        if self._action is not None:
            result = self._action(target)
        elif self.type == TYPE_GET:
            result = getattr(target, self.name)
        elif self.type == TYPE_SET:
            setattr(target, self.name, self.value)
            result = None
        else:
            method = getattr(target, self.name)
            if self.value is None:
                args = []
            elif isinstance(self.value, (list, tuple)):
                args = list(self.value)
            else:
                args = [self.value]
            result = method(*args)

        if inspect.isawaitable(result):
            result = await result
        return result

    def __repr__(self) -> str:
        if self._action is not None:
            return f"Instruction(action={getattr(self._action, '__name__', self._action)!r})"
        return f"Instruction(type={self.type!r}, name={self.name!r})"
