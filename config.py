from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings for one vending machine.

    All values come from the environment (optionally a `.env` file) and
    fall back to the machine's factory defaults.
    """

    restock_batch_size: int = 25
    drink_price: Decimal = Decimal("0.50")
    minimum_balance: Decimal = Decimal("0.50")
    opening_balance: Decimal = Decimal("100.00")
    machine_card_id: int = 1
    log_level: str = "INFO"


def _read_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}.") from None


def _read_decimal(environ: Mapping[str, str], name: str, default: Decimal) -> Decimal:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = Decimal(raw)
    except InvalidOperation:
        raise RuntimeError(f"{name} must be a decimal amount, got {raw!r}.") from None
    if not value.is_finite():
        raise RuntimeError(f"{name} must be a decimal amount, got {raw!r}.")
    return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build `Settings` from `environ`.

    When no mapping is given, a `.env` file is loaded first and the process
    environment is used.
    """

    if environ is None:
        load_dotenv()
        environ = os.environ

    settings = Settings(
        restock_batch_size=_read_int(environ, "RESTOCK_BATCH_SIZE", Settings.restock_batch_size),
        drink_price=_read_decimal(environ, "DRINK_PRICE", Settings.drink_price),
        minimum_balance=_read_decimal(environ, "MINIMUM_BALANCE", Settings.minimum_balance),
        opening_balance=_read_decimal(environ, "OPENING_BALANCE", Settings.opening_balance),
        machine_card_id=_read_int(environ, "MACHINE_CARD_ID", Settings.machine_card_id),
        log_level=environ.get("LOG_LEVEL", Settings.log_level) or Settings.log_level,
    )

    if settings.restock_batch_size <= 0:
        raise RuntimeError("RESTOCK_BATCH_SIZE must be greater than zero.")
    if settings.drink_price < 0:
        raise RuntimeError("DRINK_PRICE must not be negative.")

    return settings
