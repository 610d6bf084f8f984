from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Protocol

from .models import Account, Card, Drink


class LedgerRepository(Protocol):
    """
    Abstraction over the bank ledger: balances, cards and PIN credentials.

    Implementations are responsible for:
    - Serialising balance mutations of the same account.
    - Returning snapshots so callers cannot mutate balances behind the
      ledger's back.
    """

    def get_account(self, account_id: int) -> Optional[Account]:
        """Return a snapshot of the account, or None if not found."""

        ...

    def get_card(self, card_id: int) -> Optional[Card]:
        """Return the card with the given ID, or None if no account binds it."""

        ...

    def find_credential(self, card_id: int, supplied_pin: str) -> bool:
        """
        Return True iff a credential binds exactly this card to exactly
        this PIN string.
        """

        ...

    def deduct_balance(self, account_id: int, amount: Decimal) -> bool:
        """
        Subtract `amount` from the account's balance.

        No sufficiency check is made here. Returns False when the account
        does not exist.
        """

        ...


class InventoryRepository(Protocol):
    """
    Abstraction over the machine's stock of unsold drinks.
    """

    def add(self, drink: Drink) -> None:
        ...

    def take_by_id(self, drink_id: int) -> Optional[Drink]:
        """
        Remove and return the first drink with the given ID.

        Lookup and removal must be a single atomic step.
        """

        ...

    def count(self) -> int:
        ...

    def list_all(self) -> List[Drink]:
        """Return the drinks currently in stock, in insertion order."""

        ...
