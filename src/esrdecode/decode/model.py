from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Iterable, Optional

from esrdecode.errors import DecodeError
from esrdecode.utils.bits import extract


@dataclass(frozen=True)
class FieldInfo:
    """
    One decoded bit-field of a register, optionally refined into subfields.
    """
    name: str
    long_name: Optional[str]
    start: int
    width: int
    value: int
    description: Optional[str] = None
    subfields: tuple[FieldInfo, ...] = ()

    @classmethod
    def get(cls, register: int, name: str, long_name: Optional[str], start: int, end: int) -> FieldInfo:
        """Field covering bits [start, end) of register."""
        return cls(
            name=name,
            long_name=long_name,
            start=start,
            width=end - start,
            value=extract(register, start, end),
        )

    @classmethod
    def get_bit(cls, register: int, name: str, long_name: Optional[str], bit: int) -> FieldInfo:
        return cls.get(register, name, long_name, bit, bit + 1)

    @property
    def end(self) -> int:
        return self.start + self.width

    def with_description(self, description: Optional[str]) -> FieldInfo:
        return replace(self, description=description)

    def with_subfields(self, subfields: Iterable[FieldInfo]) -> FieldInfo:
        return replace(self, subfields=tuple(subfields))

    def describe(self, fn: Callable[[int], Optional[str]]) -> FieldInfo:
        return self.with_description(fn(self.value))

    def describe_bit(self, fn: Callable[[bool], Optional[str]]) -> FieldInfo:
        return self.with_description(fn(self.value != 0))

    def check_res0(self) -> FieldInfo:
        if self.value != 0:
            raise DecodeError(
                f"reserved bits {self.start}..{self.end - 1} must be zero, got {self.value_string()}"
            )
        return self

    def value_string(self) -> str:
        return f"{self.value:#x}"

    def value_binary_string(self) -> str:
        return f"0b{self.value:0{self.width}b}"
