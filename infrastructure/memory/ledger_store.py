from __future__ import annotations

import threading
from dataclasses import replace
from decimal import Decimal
from typing import Dict, Iterable, Optional

from domain.models import Account, AccountKind, Card, Credential
from domain.repositories import LedgerRepository


DEFAULT_OPENING_BALANCE = Decimal("100.00")


class InMemoryLedgerStore(LedgerRepository):
    """
    In-memory implementation of `LedgerRepository`.

    The store is constructed once at startup and shared by reference with
    every service that needs it. Balance deductions are serialised by a
    single lock; reads are not, so an affordability check may observe a
    balance that changes before the deduction that follows it.
    """

    def __init__(
        self,
        accounts: Iterable[Account],
        credentials: Iterable[Credential],
    ) -> None:
        self._accounts: Dict[int, Account] = {}
        self._cards: Dict[int, Card] = {}
        self._credentials: Dict[int, Credential] = {}
        self._balance_lock = threading.Lock()

        for account in accounts:
            if account.id in self._accounts:
                raise ValueError(f"Duplicate account id: {account.id}")
            self._accounts[account.id] = replace(account)
            for card in account.cards:
                if card.account_id != account.id:
                    raise ValueError(
                        f"Card {card.id} is bound to account {card.account_id}, "
                        f"not {account.id}"
                    )
                if card.id in self._cards:
                    raise ValueError(f"Card {card.id} is bound to more than one account")
                self._cards[card.id] = card

        for credential in credentials:
            if credential.card_id in self._credentials:
                raise ValueError(f"Card {credential.card_id} already has a credential")
            self._credentials[credential.card_id] = credential

    def get_account(self, account_id: int) -> Optional[Account]:
        account = self._accounts.get(account_id)
        if account is None:
            return None
        return replace(account)

    def get_card(self, card_id: int) -> Optional[Card]:
        return self._cards.get(card_id)

    def find_credential(self, card_id: int, supplied_pin: str) -> bool:
        credential = self._credentials.get(card_id)
        if credential is None:
            return False
        return credential.pin == supplied_pin

    def deduct_balance(self, account_id: int, amount: Decimal) -> bool:
        with self._balance_lock:
            account = self._accounts.get(account_id)
            if account is None:
                return False
            account.balance -= amount
            return True


def seed_ledger(opening_balance: Decimal = DEFAULT_OPENING_BALANCE) -> InMemoryLedgerStore:
    """
    Build the ledger the machine starts with: one joint account holding
    two cards, each with its own PIN.
    """

    account_id = 1
    cards = (
        Card(id=1, account_id=account_id),
        Card(id=2, account_id=account_id),
    )
    account = Account(
        id=account_id,
        balance=Decimal(opening_balance),
        cards=cards,
        kind=AccountKind.JOINT,
    )
    credentials = [
        Credential(pin="1234", card_id=1),
        Credential(pin="2345", card_id=2),
    ]
    return InMemoryLedgerStore([account], credentials)
