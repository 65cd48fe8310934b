"""
Input schema contract for registered functions.
"""

from dataclasses import dataclass, field
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from evalengine.core.errors import SchemaValidationError


@dataclass(frozen=True)
class InputSchema:
    """
    Declares the input type a registered function accepts.

    ``input`` is anything pydantic can build a TypeAdapter for: a plain type,
    an ``Annotated`` type with constraints, or a BaseModel subclass.

    Example:
        schema = InputSchema(input=Annotated[str, StringConstraints(min_length=1)])
    """

    input: Any
    _adapter: TypeAdapter = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_adapter", TypeAdapter(self.input))

    def validate(self, value: Any) -> Any:
        """
        Validate a declared input.

        Returns:
            The validated (possibly coerced) value

        Raises:
            SchemaValidationError: If the value does not conform
        """
        try:
            return self._adapter.validate_python(value)
        except PydanticValidationError as e:
            errors = [
                {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
                for err in e.errors()
            ]
            raise SchemaValidationError(value, errors) from e
