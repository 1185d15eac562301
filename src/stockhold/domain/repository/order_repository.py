"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockhold.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_by_number(self, order_number: str) -> Order | None:
        """Return an order by its order number, or None if not found."""

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[Order]:
        """Return every order placed by a user, oldest first."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order."""
