# app/utils/enums.py

import enum
from typing import Type, TypeVar

from app.core.exceptions import InvalidArgumentError

E = TypeVar("E", bound=enum.Enum)


def parse_choice(enum_cls: Type[E], value, label: str) -> E:
    """
    Parse free text from a client into a member of ``enum_cls``.

    Matching is case-insensitive on the member value ("fire" -> Fire). Anything
    outside the closed set is an InvalidArgumentError, never a silent default.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        wanted = value.strip().lower()
        for member in enum_cls:
            if str(member.value).lower() == wanted:
                return member
    raise InvalidArgumentError(f"Invalid {label}: {value}")
