"""Application service: List a user's orders (query)."""

from __future__ import annotations

from stockhold.application.dto import OrderDTO
from stockhold.domain.repository.order_repository import OrderRepository


class ListUserOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, user_id: str) -> list[OrderDTO]:
        return [OrderDTO.from_order(o) for o in self._order_repo.list_by_user(user_id)]
