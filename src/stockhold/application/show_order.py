"""Application service: Show Order use case (query)."""

from __future__ import annotations

from stockhold.application.dto import OrderDTO
from stockhold.domain.exceptions import ResourceNotFoundError
from stockhold.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise ResourceNotFoundError(f"Order #{order_id} not found")
        return OrderDTO.from_order(order)

    def handle_by_number(self, order_number: str) -> OrderDTO:
        order = self._order_repo.get_by_number(order_number)
        if order is None:
            raise ResourceNotFoundError(f"Order not found with number: {order_number}")
        return OrderDTO.from_order(order)
