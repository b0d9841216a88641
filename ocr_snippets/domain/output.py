# ocr_snippets/domain/output.py

from dataclasses import dataclass
from typing import Any, Dict, Iterable


# Plain dicts keep insertion order, which is part of the response contract.
OutputTree = Dict[str, Any]


class _Absent:
    """Marker for a field that must not appear in the output tree."""

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()


@dataclass(frozen=True)
class OutputField:
    name: str
    value: Any = ABSENT

    @property
    def is_present(self) -> bool:
        return self.value is not ABSENT


def required(name: str, value: Any) -> OutputField:
    """A field that is always emitted, even when its value is empty."""
    return OutputField(name, value)


def optional(name: str, value: Any) -> OutputField:
    """A field that is emitted only when ``value`` is not None."""
    return OutputField(name, ABSENT if value is None else value)


def build_output_tree(fields: Iterable[OutputField]) -> OutputTree:
    """
    Assemble an ordered output tree from a sequence of fields.
    Absent fields are dropped; present ones keep the order they were given in.
    """
    tree: OutputTree = {}
    seen = set()
    for output_field in fields:
        if output_field.name in seen:
            raise ValueError(f"Duplicate output field: '{output_field.name}'")
        seen.add(output_field.name)
        if output_field.is_present:
            tree[output_field.name] = output_field.value
    return tree
