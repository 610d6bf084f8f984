from __future__ import annotations

from dataclasses import dataclass

from application.orchestrator import TransactionOrchestrator
from application.services import (
    AffordabilityService,
    CardValidationService,
    InventoryService,
    PurchaseService,
)
from config import Settings, load_settings
from infrastructure.memory.inventory_store import InMemoryInventoryStore
from infrastructure.memory.ledger_store import InMemoryLedgerStore, seed_ledger
from interfaces.console.handlers import TextConsole, render_outcome
from logging_setup import logger, setup_logging


@dataclass
class Application:
    """Everything the machine needs, wired together once at startup."""

    settings: Settings
    ledger: InMemoryLedgerStore
    inventory_store: InMemoryInventoryStore
    inventory: InventoryService
    orchestrator: TransactionOrchestrator


def build_application(settings: Settings) -> Application:
    ledger = seed_ledger(settings.opening_balance)
    inventory_store = InMemoryInventoryStore()
    inventory = InventoryService(inventory_store, settings.drink_price)

    orchestrator = TransactionOrchestrator(
        card_validation=CardValidationService(ledger),
        affordability=AffordabilityService(ledger, settings.minimum_balance),
        inventory=inventory,
        purchase=PurchaseService(ledger),
        restock_batch_size=settings.restock_batch_size,
    )

    return Application(
        settings=settings,
        ledger=ledger,
        inventory_store=inventory_store,
        inventory=inventory,
        orchestrator=orchestrator,
    )


def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)

    app = build_application(settings)
    card = app.ledger.get_card(settings.machine_card_id)
    if card is None:
        raise RuntimeError(f"MACHINE_CARD_ID {settings.machine_card_id} is not bound to any account.")

    app.inventory.stock_up(settings.restock_batch_size)
    logger.info("Application created successfully.")

    app.orchestrator.run(TextConsole(), card, render_outcome)


if __name__ == "__main__":
    main()
