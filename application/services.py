from __future__ import annotations

from decimal import Decimal
from typing import Optional

from domain.models import Drink, DrinkType, TransactionRequest
from domain.repositories import InventoryRepository, LedgerRepository
from logging_setup import logger


class CardValidationService:
    """
    Checks a supplied PIN against the credential bound to a card.

    Every call is independent: there is no attempt counting or lockout.
    """

    def __init__(self, ledger: LedgerRepository) -> None:
        self._ledger = ledger

    def is_supplied_credentials_valid(self, request: TransactionRequest) -> bool:
        return self.authenticate(request.card.id, request.supplied_pin)

    def authenticate(self, card_id: int, supplied_pin: str) -> bool:
        return self._ledger.find_credential(card_id, supplied_pin)


class AffordabilityService:
    """
    Decides whether an account may start a purchase.

    The check is a point-in-time read of the balance; nothing stops the
    balance from changing before the purchase is completed.
    """

    def __init__(self, ledger: LedgerRepository, minimum_balance: Decimal) -> None:
        self._ledger = ledger
        self._minimum_balance = Decimal(minimum_balance)

    def is_above_minimum(self, account_id: int) -> bool:
        account = self._ledger.get_account(account_id)
        if account is None:
            return False
        return account.balance > self._minimum_balance


class PurchaseService:
    """Charges an account for a dispensed drink."""

    def __init__(self, ledger: LedgerRepository) -> None:
        self._ledger = ledger

    def complete_purchase(self, account_id: int, amount: Decimal) -> bool:
        """
        Deduct `amount` from the account.

        Affordability is not re-checked and the deduction cannot be undone.
        Returns False when the account does not exist.
        """

        applied = self._ledger.deduct_balance(account_id, amount)
        if applied:
            logger.info(f"Charged {amount:.2f} to account {account_id}")
        return applied


class InventoryService:
    """
    Stock policy on top of an `InventoryRepository`: restocking,
    availability and the stock listing shown to customers.
    """

    def __init__(
        self,
        inventory: InventoryRepository,
        unit_price: Decimal,
        drink_type: DrinkType = DrinkType.SOFT,
    ) -> None:
        if unit_price < 0:
            raise ValueError("Unit price must not be negative.")
        self._inventory = inventory
        self._unit_price = Decimal(unit_price)
        self._drink_type = drink_type

    def stock_up(self, quantity: int) -> None:
        """
        Add `quantity` new drinks with IDs 1..quantity.

        IDs restart at 1 for every batch, so restocking a machine that is
        not empty produces duplicate IDs.
        """

        if quantity < 0:
            raise ValueError("Quantity must not be negative.")

        for i in range(quantity):
            self._inventory.add(
                Drink(id=i + 1, drink_type=self._drink_type, price=self._unit_price)
            )
        logger.info(f"Stocked {quantity} drinks, {self._inventory.count()} in stock")

    def has_stock(self) -> bool:
        return self._inventory.count() > 0

    def take_item(self, drink_id: int) -> Optional[Drink]:
        return self._inventory.take_by_id(drink_id)

    def describe_stock(self) -> str:
        lines = [
            f"Drink Id: {drink.id} - Price: £{drink.price:.2f} - Type: {drink.drink_type.value}"
            for drink in self._inventory.list_all()
        ]
        return "\n".join(lines)
