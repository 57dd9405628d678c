"""
Entry function payload model.

An entry function call names a module function and carries its ordered
arguments. The argument dataclasses give each marketplace function named
fields and produce the positional order in a single place.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Tuple

from marketplace.exceptions import PayloadError


U64_MAX = 2 ** 64 - 1

ENTRY_FUNCTION_PAYLOAD = "entry_function_payload"


class MoveType(str, Enum):
    """Move argument types used by the marketplace functions."""
    ADDRESS = "address"
    STRING = "0x1::string::String"
    U64 = "u64"


@dataclass(frozen=True)
class MoveArgument:
    """A single positional argument of an entry function call."""
    name: str
    value: Any
    move_type: MoveType

    def __post_init__(self):
        if isinstance(self.move_type, str):
            object.__setattr__(self, "move_type", MoveType(self.move_type))
        if self.move_type == MoveType.U64:
            if not isinstance(self.value, int) or isinstance(self.value, bool):
                raise PayloadError(f"{self.name} must be an integer, got {self.value!r}")
            if not 0 <= self.value <= U64_MAX:
                raise PayloadError(f"{self.name} is out of u64 range: {self.value}")

    @classmethod
    def address(cls, name: str, value: str) -> "MoveArgument":
        return cls(name, value, MoveType.ADDRESS)

    @classmethod
    def string(cls, name: str, value: str) -> "MoveArgument":
        return cls(name, value, MoveType.STRING)

    @classmethod
    def u64(cls, name: str, value: int) -> "MoveArgument":
        return cls(name, value, MoveType.U64)


@dataclass(frozen=True)
class EntryFunctionCall:
    """
    A call to an on-chain entry function.

    Attributes:
        function: Fully qualified id, ``<address>::<module>::<function>``
        type_arguments: Ordered type arguments
        arguments: Ordered arguments matching the function's parameters
    """

    function: str
    type_arguments: Tuple[str, ...] = ()
    arguments: Tuple[MoveArgument, ...] = ()

    @property
    def module(self) -> str:
        """Module part of the function id (``<address>::<module>``)."""
        return self.function.rsplit("::", 1)[0]

    @property
    def function_name(self) -> str:
        return self.function.rsplit("::", 1)[1]

    @property
    def argument_values(self) -> List[Any]:
        return [arg.value for arg in self.arguments]

    def to_dict(self) -> dict:
        """Render as a JSON entry function payload."""
        return {
            "type": ENTRY_FUNCTION_PAYLOAD,
            "function": self.function,
            "type_arguments": list(self.type_arguments),
            "arguments": [
                str(arg.value) if arg.move_type == MoveType.U64 else arg.value
                for arg in self.arguments
            ],
        }


@dataclass(frozen=True)
class ListNftArgs:
    """Arguments of ``marketplace::list_nft``."""
    seller: str
    collection_name: str
    token_name: str
    price: int
    expiration: int
    property_version: int = 0

    def to_arguments(self) -> Tuple[MoveArgument, ...]:
        return (
            MoveArgument.address("seller", self.seller),
            MoveArgument.string("collection_name", self.collection_name),
            MoveArgument.string("token_name", self.token_name),
            MoveArgument.u64("price", self.price),
            MoveArgument.u64("expiration", self.expiration),
            MoveArgument.u64("property_version", self.property_version),
        )


@dataclass(frozen=True)
class BuyTokenArgs:
    """Arguments of ``marketplace::buy_token``."""
    seller: str
    buyer: str
    collection_name: str
    token_name: str
    property_version: int = 0

    def to_arguments(self) -> Tuple[MoveArgument, ...]:
        return (
            MoveArgument.address("seller", self.seller),
            MoveArgument.address("buyer", self.buyer),
            MoveArgument.string("collection_name", self.collection_name),
            MoveArgument.string("token_name", self.token_name),
            MoveArgument.u64("property_version", self.property_version),
        )
