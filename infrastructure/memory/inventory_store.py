from __future__ import annotations

import threading
from typing import List, Optional

from domain.models import Drink
from domain.repositories import InventoryRepository


class InMemoryInventoryStore(InventoryRepository):
    """
    In-memory implementation of `InventoryRepository`.

    Drinks are kept in insertion order. Every access goes through one lock
    so that a drink taken by one caller can never be handed to another.
    """

    def __init__(self) -> None:
        self._drinks: List[Drink] = []
        self._lock = threading.Lock()

    def add(self, drink: Drink) -> None:
        with self._lock:
            self._drinks.append(drink)

    def take_by_id(self, drink_id: int) -> Optional[Drink]:
        with self._lock:
            for index, drink in enumerate(self._drinks):
                if drink.id == drink_id:
                    return self._drinks.pop(index)
            return None

    def count(self) -> int:
        with self._lock:
            return len(self._drinks)

    def list_all(self) -> List[Drink]:
        with self._lock:
            return list(self._drinks)
