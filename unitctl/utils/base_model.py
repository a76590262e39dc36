import re
from typing import Any

from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict

_ARGS_BLOCK = re.compile(
    r'\n\s*Args:\s*\n(.*?)(?:\n\s*\n|\n\s*[A-Z][a-z]+:|\Z)',
    re.DOTALL,
)
_ARG_LINE = re.compile(r'^\s*(\w+):\s*(.*)$')


def parse_docstring_args(docstring: str | None) -> dict[str, str]:
    """Extract `name: description` pairs from a Google style Args block.

    Continuation lines are folded into the preceding entry.
    """
    if not docstring:
        return {}

    match = _ARGS_BLOCK.search(docstring)
    if not match:
        return {}

    descriptions: dict[str, list[str]] = {}
    current: str | None = None

    for line in match.group(1).split('\n'):
        field_match = _ARG_LINE.match(line)
        if field_match:
            current = field_match.group(1)
            first = field_match.group(2).strip()
            descriptions[current] = [first] if first else []
        elif current and line.strip():
            descriptions[current].append(line.strip())

    return {
        name: ' '.join(parts).strip()
        for name, parts in descriptions.items()
        if parts
    }


class BaseModel(PydanticBaseModel):
    """Frozen pydantic model that documents its fields from the docstring.

    Field descriptions missing from `Field(...)` are filled in once, when
    the subclass is created, from the Args block of the class docstring.
    """
    model_config = ConfigDict(frozen=True)

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)

        for name, description in parse_docstring_args(cls.__doc__).items():
            field_info = cls.model_fields.get(name)
            if field_info is not None and field_info.description is None:
                field_info.description = description
