from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Protocol

from application.services import (
    AffordabilityService,
    CardValidationService,
    InventoryService,
    PurchaseService,
)
from domain.models import Card, Drink, TransactionRequest
from logging_setup import logger


class TransactionState(str, Enum):
    AWAITING_CREDENTIALS = "awaiting_credentials"
    AUTHENTICATING = "authenticating"
    CHECKING_AFFORDABILITY = "checking_affordability"
    AWAITING_SELECTION = "awaiting_selection"
    DISPENSING = "dispensing"
    PAYING = "paying"
    COMPLETE = "complete"
    REJECTED = "rejected"
    INVALID_SELECTION = "invalid_selection"
    RESTOCKED = "restocked"
    FAULTED = "faulted"


@dataclass
class TransactionOutcome:
    """
    Final state of one loop iteration.

    `choice` carries the raw selection text for invalid selections,
    `drink` the dispensed drink for completed sales.
    """

    state: TransactionState
    drink: Optional[Drink] = None
    choice: Optional[str] = None
    payment_applied: bool = False
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.state is TransactionState.COMPLETE


class Console(Protocol):
    """Line-oriented text surface the machine talks to the customer through."""

    def read_line(self) -> Optional[str]:
        """Return the next line without its line break, or None at end of input."""

        ...

    def write_line(self, text: str) -> None:
        ...


_CHOICE_PATTERN = re.compile(r"[+-]?[0-9]+")


def _parse_choice(choice: str) -> Optional[int]:
    """Parse a drink id typed by the customer: optional sign and ASCII digits only."""

    text = choice.strip()
    if not _CHOICE_PATTERN.fullmatch(text):
        return None
    return int(text)


def _advance(state: TransactionState, subject: str) -> None:
    logger.debug(f"{subject} -> {state.value}")


class TransactionOrchestrator:
    """
    Drives the machine: restocks when empty, otherwise runs one customer
    transaction (authenticate, check funds, take selection, dispense, pay).
    """

    def __init__(
        self,
        card_validation: CardValidationService,
        affordability: AffordabilityService,
        inventory: InventoryService,
        purchase: PurchaseService,
        restock_batch_size: int,
    ) -> None:
        if restock_batch_size <= 0:
            raise ValueError("Restock batch size must be greater than zero.")
        self._card_validation = card_validation
        self._affordability = affordability
        self._inventory = inventory
        self._purchase = purchase
        self._restock_batch_size = restock_batch_size

    @property
    def restock_batch_size(self) -> int:
        return self._restock_batch_size

    def run_transaction(
        self,
        request: TransactionRequest,
        read_selection: Callable[[], Optional[str]],
    ) -> TransactionOutcome:
        """
        Run a single transaction for `request`.

        `read_selection` is only called once the card has been accepted and
        the account can afford a drink. Rejections and invalid selections
        leave both the ledger and the inventory untouched.
        """

        card_label = f"Card {request.card.id}"
        _advance(TransactionState.AUTHENTICATING, card_label)
        if not self._card_validation.is_supplied_credentials_valid(request):
            logger.info(f"Card {request.card.id}: invalid credentials")
            return TransactionOutcome(
                state=TransactionState.REJECTED,
                error_message="Invalid credentials",
            )

        account_id = request.card.account_id
        _advance(TransactionState.CHECKING_AFFORDABILITY, card_label)
        if not self._affordability.is_above_minimum(account_id):
            logger.info(f"Account {account_id}: balance not above minimum")
            return TransactionOutcome(
                state=TransactionState.REJECTED,
                error_message="Insufficient funds",
            )

        _advance(TransactionState.AWAITING_SELECTION, card_label)
        choice = read_selection()
        if choice is None:
            choice = ""
        drink_id = _parse_choice(choice)
        drink = self._inventory.take_item(drink_id) if drink_id is not None else None
        if drink is None:
            logger.info(f"Invalid selection {choice!r}")
            return TransactionOutcome(
                state=TransactionState.INVALID_SELECTION,
                choice=choice,
                error_message=f"{choice} is an invalid selection",
            )

        _advance(TransactionState.DISPENSING, f"Drink {drink.id}")
        _advance(TransactionState.PAYING, f"Account {account_id}")
        # The drink is already out of the machine; a failed charge is logged
        # and accepted as a loss.
        payment_applied = self._purchase.complete_purchase(account_id, drink.price)
        if not payment_applied:
            logger.error(
                f"Charge of {drink.price:.2f} for drink {drink.id} was not applied "
                f"to account {account_id}"
            )

        logger.info(f"Sold drink {drink.id} to account {account_id}")
        return TransactionOutcome(
            state=TransactionState.COMPLETE,
            drink=drink,
            payment_applied=payment_applied,
        )

    def restock(self) -> TransactionOutcome:
        logger.info("Replenishing inventory")
        self._inventory.stock_up(self._restock_batch_size)
        return TransactionOutcome(state=TransactionState.RESTOCKED)

    def step(self, console: Console, card: Card) -> Optional[TransactionOutcome]:
        """
        Run one iteration of the machine loop.

        Returns None when the console has no more input. Any exception raised
        while serving the customer is logged and reported as a FAULTED
        outcome; work done before the fault is not rolled back.
        """

        try:
            if not self._inventory.has_stock():
                return self.restock()

            console.write_line("Available drinks:")
            console.write_line(self._inventory.describe_stock())
            console.write_line("Please enter pin:")
            pin = console.read_line()
            if pin is None:
                return None

            request = TransactionRequest(card=card, supplied_pin=pin)

            def read_selection() -> Optional[str]:
                console.write_line("Please enter one of the drink IDs shown above:")
                return console.read_line()

            return self.run_transaction(request, read_selection)
        except Exception as exc:
            logger.exception("Unexpected error while serving a transaction")
            return TransactionOutcome(
                state=TransactionState.FAULTED,
                error_message=str(exc) or exc.__class__.__name__,
            )

    def run(
        self,
        console: Console,
        card: Card,
        render: Callable[[TransactionOutcome], str],
        max_iterations: Optional[int] = None,
    ) -> List[TransactionOutcome]:
        """
        Loop `step` until the console runs out of input or, when given,
        `max_iterations` iterations have run. Each outcome is rendered with
        `render` and written to the console.

        Outcomes are only collected and returned for bounded runs.
        """

        outcomes: List[TransactionOutcome] = []
        iterations = 0
        while max_iterations is None or iterations < max_iterations:
            iterations += 1
            outcome = self.step(console, card)
            if outcome is None:
                logger.info("Console closed, stopping")
                break
            console.write_line(render(outcome))
            if max_iterations is not None:
                outcomes.append(outcome)
        return outcomes
