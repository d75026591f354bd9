"""Shared column helpers"""

import enum
from typing import Type

from sqlalchemy import Enum


def enum_column(enum_cls: Type[enum.Enum]) -> Enum:
    """Store an enum by its value (e.g. "single-select") rather than its member name"""
    return Enum(
        enum_cls,
        values_callable=lambda members: [member.value for member in members],
        native_enum=False,
        length=32,
        validate_strings=True,
    )
