"""
Transaction payloads.

`TransactionPayload` is a closed union; its BCS variant indices are fixed by
the network:

    Script        = 0
    ModuleBundle  = 1
    EntryFunction = 2

Arguments of an `EntryFunction` are opaque, already BCS-encoded byte strings.
Nothing here checks them against the target function's real signature: the
client cannot know it without an extra round trip, and the network verifies
it anyway.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Sequence, Tuple, Union

from ..address import AccountAddress
from ..errors import TypeTagParseError
from .type_tag import TypeTag, coerce_type_tag, is_identifier

__all__ = [
    "PayloadKind",
    "ModuleId",
    "EntryFunction",
    "TransactionArgumentKind",
    "TransactionArgument",
    "Script",
    "ModuleBundle",
    "TransactionPayload",
    "entry_function",
]


class PayloadKind(IntEnum):
    SCRIPT = 0
    MODULE_BUNDLE = 1
    ENTRY_FUNCTION = 2


@dataclass(frozen=True)
class ModuleId:
    address: AccountAddress
    name: str

    def __post_init__(self) -> None:
        if not is_identifier(self.name):
            raise TypeTagParseError("invalid module name", str(self.name))

    @classmethod
    def from_str(cls, text: str) -> "ModuleId":
        """Parse ``"0x1::coin"``."""
        parts = [p.strip() for p in text.split("::")]
        if len(parts) != 2 or not parts[1]:
            raise TypeTagParseError("expected address::module", text)
        return cls(AccountAddress.from_hex(parts[0]), parts[1])

    def __str__(self) -> str:
        return f"{self.address}::{self.name}"


def _as_arg_bytes(args: Sequence[bytes]) -> Tuple[bytes, ...]:
    out = []
    for i, a in enumerate(args):
        if not isinstance(a, (bytes, bytearray, memoryview)):
            raise TypeError(
                f"argument {i} must be pre-encoded BCS bytes, got {type(a).__name__}"
            )
        out.append(bytes(a))
    return tuple(out)


@dataclass(frozen=True)
class EntryFunction:
    module: ModuleId
    function: str
    type_args: Tuple[TypeTag, ...] = field(default=())
    args: Tuple[bytes, ...] = field(default=())

    def __post_init__(self) -> None:
        if not is_identifier(self.function):
            raise TypeTagParseError("invalid function name", str(self.function))
        object.__setattr__(self, "type_args", tuple(self.type_args))
        object.__setattr__(self, "args", _as_arg_bytes(self.args))

    @classmethod
    def natural(
        cls,
        module: str,
        function: str,
        type_args: Sequence[Union[TypeTag, str]] = (),
        args: Sequence[bytes] = (),
    ) -> "EntryFunction":
        """
        Build from the human-readable pieces::

            EntryFunction.natural(
                "0x1::coin", "transfer",
                ["0x1::aptos_coin::AptosCoin"],
                [encode_address(receiver), bcs.encode_u64(717)],
            )
        """
        return cls(
            ModuleId.from_str(module),
            function,
            tuple(coerce_type_tag(t) for t in type_args),
            tuple(args),
        )

    def __str__(self) -> str:
        generics = ""
        if self.type_args:
            generics = "<" + ", ".join(str(t) for t in self.type_args) + ">"
        return f"{self.module}::{self.function}{generics}({len(self.args)} args)"


class TransactionArgumentKind(IntEnum):
    U8 = 0
    U64 = 1
    U128 = 2
    ADDRESS = 3
    U8_VECTOR = 4
    BOOL = 5
    U16 = 6
    U32 = 7
    U256 = 8


@dataclass(frozen=True)
class TransactionArgument:
    """A typed script argument; unlike entry-function args these carry their kind."""

    kind: TransactionArgumentKind
    value: Union[int, bool, bytes, AccountAddress]

    @classmethod
    def u8(cls, v: int) -> "TransactionArgument":
        return cls(TransactionArgumentKind.U8, v)

    @classmethod
    def u16(cls, v: int) -> "TransactionArgument":
        return cls(TransactionArgumentKind.U16, v)

    @classmethod
    def u32(cls, v: int) -> "TransactionArgument":
        return cls(TransactionArgumentKind.U32, v)

    @classmethod
    def u64(cls, v: int) -> "TransactionArgument":
        return cls(TransactionArgumentKind.U64, v)

    @classmethod
    def u128(cls, v: int) -> "TransactionArgument":
        return cls(TransactionArgumentKind.U128, v)

    @classmethod
    def u256(cls, v: int) -> "TransactionArgument":
        return cls(TransactionArgumentKind.U256, v)

    @classmethod
    def address(cls, v: Union[AccountAddress, str]) -> "TransactionArgument":
        return cls(TransactionArgumentKind.ADDRESS, AccountAddress.coerce(v))

    @classmethod
    def u8_vector(cls, v: bytes) -> "TransactionArgument":
        return cls(TransactionArgumentKind.U8_VECTOR, bytes(v))

    @classmethod
    def boolean(cls, v: bool) -> "TransactionArgument":
        return cls(TransactionArgumentKind.BOOL, v)


@dataclass(frozen=True)
class Script:
    code: bytes
    type_args: Tuple[TypeTag, ...] = field(default=())
    args: Tuple[TransactionArgument, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", bytes(self.code))
        object.__setattr__(self, "type_args", tuple(self.type_args))
        object.__setattr__(self, "args", tuple(self.args))


@dataclass(frozen=True)
class ModuleBundle:
    modules: Tuple[bytes, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "modules", tuple(bytes(m) for m in self.modules))


TransactionPayload = Union[Script, ModuleBundle, EntryFunction]


def entry_function(
    module_address: Union[AccountAddress, str],
    module_name: str,
    function_name: str,
    type_args: Sequence[Union[TypeTag, str]] = (),
    args: Sequence[bytes] = (),
) -> EntryFunction:
    """Build an EntryFunction from its address, module and function names."""
    return EntryFunction(
        ModuleId(AccountAddress.coerce(module_address), module_name),
        function_name,
        tuple(coerce_type_tag(t) for t in type_args),
        tuple(args),
    )
