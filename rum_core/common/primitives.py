from enum import StrEnum
from typing import Any
from typing import Self

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema
from pydantic_core import core_schema


class NonEmptyStr(str):
    """A string that is stripped on construction and cannot end up empty.

    Subclasses (the identifier types) validate through their own constructor, so a
    pydantic field typed with one always holds an instance of that subclass.
    """

    def __new__(cls, value: str) -> Self:
        stripped = value.strip()
        if not stripped:
            raise ValueError(f"{cls.__name__} cannot be empty")
        return super().__new__(cls, stripped)

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: GetCoreSchemaHandler) -> CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls,
            core_schema.str_schema(),
            serialization=core_schema.to_string_ser_schema(),
        )


class NonNegativeFloat(float):
    """A float that is >= 0, such as a duration or a time relative to the origin."""

    def __new__(cls, value: float) -> Self:
        if value < 0:
            raise ValueError(f"{cls.__name__} must be >= 0, got {value}")
        return super().__new__(cls, value)

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: GetCoreSchemaHandler) -> CoreSchema:
        return core_schema.no_info_after_validator_function(cls, core_schema.float_schema())


class _CaseFoldingStrEnum(StrEnum):
    @staticmethod
    def _fold_name(name: str) -> str:
        raise NotImplementedError()

    @classmethod
    def _missing_(cls, value: object) -> Self | None:
        # Lookups accept any casing of a member value ("error" finds ERROR)
        if isinstance(value, str):
            for member in cls:
                if member.value == cls._fold_name(value):
                    return member
        return None


class UpperCaseStrEnum(_CaseFoldingStrEnum):
    """A StrEnum whose auto() values are the uppercased member names."""

    @staticmethod
    def _generate_next_value_(name: str, start: int, count: int, last_values: list[str]) -> str:
        return name.upper()

    @staticmethod
    def _fold_name(name: str) -> str:
        return name.upper()


class LowerCaseStrEnum(_CaseFoldingStrEnum):
    """A StrEnum whose auto() values are the lowercased member names.

    Wire tags are lowercase ("view", "long_task"), so member names and serialized
    values stay in lockstep.
    """

    @staticmethod
    def _generate_next_value_(name: str, start: int, count: int, last_values: list[str]) -> str:
        return name.lower()

    @staticmethod
    def _fold_name(name: str) -> str:
        return name.lower()
