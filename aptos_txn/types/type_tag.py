"""
Move type descriptors.

`TypeTag` is a closed union of three value types:

- `PrimitiveTypeTag` - bool, u8, u16, u32, u64, u128, u256, address, signer
- `VectorTypeTag`    - vector<T>
- `StructTag`        - address::module::Name<T1, T2, ...>

The textual grammar accepted by `parse_type_tag`::

    type_tag   := primitive | "vector" "<" type_tag ">" | struct_tag
    struct_tag := address "::" ident "::" ident [ "<" type_tag ("," type_tag)* ">" ]

Whitespace around tokens is ignored. `str(tag)` renders the canonical form,
which parses back to an equal tag.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional, Tuple, Union

from ..address import AccountAddress
from ..errors import AddressParseError, TypeTagParseError

__all__ = [
    "TypeTagKind",
    "PrimitiveTypeTag",
    "VectorTypeTag",
    "StructTag",
    "TypeTag",
    "BOOL",
    "U8",
    "U16",
    "U32",
    "U64",
    "U128",
    "U256",
    "ADDRESS",
    "SIGNER",
    "PRIMITIVES",
    "is_identifier",
    "parse_type_tag",
    "coerce_type_tag",
]

_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class TypeTagKind(IntEnum):
    """BCS variant index of each TypeTag kind."""

    BOOL = 0
    U8 = 1
    U64 = 2
    U128 = 3
    ADDRESS = 4
    SIGNER = 5
    VECTOR = 6
    STRUCT = 7
    U16 = 8
    U32 = 9
    U256 = 10


def is_identifier(name: str) -> bool:
    return isinstance(name, str) and bool(_IDENT_RE.match(name))


@dataclass(frozen=True)
class PrimitiveTypeTag:
    kind: TypeTagKind

    def __post_init__(self) -> None:
        if self.kind in (TypeTagKind.VECTOR, TypeTagKind.STRUCT):
            raise ValueError(f"{self.kind.name} is not a primitive type tag")
        object.__setattr__(self, "kind", TypeTagKind(self.kind))

    def __str__(self) -> str:
        return self.kind.name.lower()


@dataclass(frozen=True)
class VectorTypeTag:
    element: "TypeTag"

    def __str__(self) -> str:
        return f"vector<{self.element}>"


@dataclass(frozen=True)
class StructTag:
    address: AccountAddress
    module: str
    name: str
    type_args: Tuple["TypeTag", ...] = field(default=())

    def __post_init__(self) -> None:
        if not is_identifier(self.module):
            raise TypeTagParseError("invalid module name", str(self.module))
        if not is_identifier(self.name):
            raise TypeTagParseError("invalid struct name", str(self.name))
        object.__setattr__(self, "type_args", tuple(self.type_args))

    @classmethod
    def from_str(cls, text: str) -> "StructTag":
        tag = parse_type_tag(text)
        if not isinstance(tag, StructTag):
            raise TypeTagParseError("not a struct type", text)
        return tag

    def __str__(self) -> str:
        base = f"{self.address}::{self.module}::{self.name}"
        if not self.type_args:
            return base
        return base + "<" + ", ".join(str(t) for t in self.type_args) + ">"


TypeTag = Union[PrimitiveTypeTag, VectorTypeTag, StructTag]

BOOL = PrimitiveTypeTag(TypeTagKind.BOOL)
U8 = PrimitiveTypeTag(TypeTagKind.U8)
U16 = PrimitiveTypeTag(TypeTagKind.U16)
U32 = PrimitiveTypeTag(TypeTagKind.U32)
U64 = PrimitiveTypeTag(TypeTagKind.U64)
U128 = PrimitiveTypeTag(TypeTagKind.U128)
U256 = PrimitiveTypeTag(TypeTagKind.U256)
ADDRESS = PrimitiveTypeTag(TypeTagKind.ADDRESS)
SIGNER = PrimitiveTypeTag(TypeTagKind.SIGNER)

PRIMITIVES: Dict[str, PrimitiveTypeTag] = {
    str(t): t for t in (BOOL, U8, U16, U32, U64, U128, U256, ADDRESS, SIGNER)
}


# --- Parsing -----------------------------------------------------------------


def _split_type_args(inner: str, context: str) -> List[str]:
    """Split `A, B<C, D>, E` on top-level commas."""
    parts: List[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(inner):
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth -= 1
            if depth < 0:
                raise TypeTagParseError("unbalanced angle brackets", context)
        elif ch == "," and depth == 0:
            parts.append(inner[start:i])
            start = i + 1
    if depth != 0:
        raise TypeTagParseError("unbalanced angle brackets", context)
    parts.append(inner[start:])

    out = [p.strip() for p in parts]
    if any(not p for p in out):
        raise TypeTagParseError("empty generic argument", context)
    return out


def _parse(text: str) -> TypeTag:
    s = text.strip()
    if not s:
        raise TypeTagParseError("empty type")

    args: Optional[List[str]] = None
    lt = s.find("<")
    if lt == -1:
        if ">" in s:
            raise TypeTagParseError("unbalanced angle brackets", s)
        head = s
    else:
        if not s.endswith(">"):
            raise TypeTagParseError("unbalanced angle brackets", s)
        head = s[:lt].strip()
        args = _split_type_args(s[lt + 1 : -1], s)

    if "::" in head:
        return _parse_struct(head, args, s)

    if head == "vector":
        if args is None or len(args) != 1:
            raise TypeTagParseError("vector takes exactly one type argument", s)
        return VectorTypeTag(_parse(args[0]))

    prim = PRIMITIVES.get(head)
    if prim is None:
        raise TypeTagParseError("unknown type", head)
    if args is not None:
        raise TypeTagParseError("primitive types take no type arguments", s)
    return prim


def _parse_struct(head: str, args: Optional[List[str]], whole: str) -> StructTag:
    segments = [seg.strip() for seg in head.split("::")]
    if len(segments) != 3:
        raise TypeTagParseError("expected address::module::name", head)
    addr_text, module, name = segments
    if not module:
        raise TypeTagParseError("missing module name", head)
    if not name:
        raise TypeTagParseError("missing struct name", head)
    try:
        address = AccountAddress.from_hex(addr_text)
    except AddressParseError as e:
        raise TypeTagParseError(f"invalid address ({e.message})", addr_text) from e
    type_args: Tuple[TypeTag, ...] = ()
    if args is not None:
        type_args = tuple(_parse(a) for a in args)
    return StructTag(address, module, name, type_args)


def parse_type_tag(text: str) -> TypeTag:
    """Parse the textual form of a Move type, e.g. ``vector<0x1::string::String>``."""
    if not isinstance(text, str):
        raise TypeTagParseError("type tag must be a string", repr(text))
    return _parse(text)


def coerce_type_tag(value: Union[TypeTag, str]) -> TypeTag:
    if isinstance(value, (PrimitiveTypeTag, VectorTypeTag, StructTag)):
        return value
    return parse_type_tag(value)
