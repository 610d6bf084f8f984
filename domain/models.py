from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Tuple


class DrinkType(str, Enum):
    SOFT = "soft"


class AccountKind(str, Enum):
    STANDARD = "standard"
    JOINT = "joint"


@dataclass(frozen=True)
class Card:
    """
    A payment card as presented to the machine's reader.

    A card is bound to exactly one account for its whole lifetime.
    """

    id: int
    account_id: int


@dataclass
class Account:
    """
    Balance-holding entity in the bank ledger.

    Several cards may be bound to the same account (a joint account).
    The kind is only a tag; no behaviour depends on it.
    """

    id: int
    balance: Decimal
    cards: Tuple[Card, ...] = field(default_factory=tuple)
    kind: AccountKind = AccountKind.STANDARD


@dataclass(frozen=True)
class Credential:
    """PIN bound to a single card."""

    pin: str
    card_id: int


@dataclass(frozen=True)
class Drink:
    id: int
    drink_type: DrinkType
    price: Decimal


@dataclass(frozen=True)
class TransactionRequest:
    """A card plus the PIN typed by the customer for one interaction."""

    card: Card
    supplied_pin: str
