from __future__ import annotations

from dataclasses import dataclass

from packages.shared.schemas.checkout_v1 import OrderLineV1


@dataclass
class CartItem:
    product_id: str
    name: str
    unit_price: float
    quantity: int
    stock: int
    selected_color: str | None = None
    image_url: str | None = None

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


class Cart:
    """Shopper's cart for one browser session.

    Quantities are clamped to the stock seen when the product was added; stock is only
    enforced here, the server trusts the snapshot it is sent after payment.
    """

    def __init__(self) -> None:
        self._items: list[CartItem] = []

    @property
    def items(self) -> list[CartItem]:
        return list(self._items)

    def _find(self, product_id: str) -> CartItem | None:
        return next((i for i in self._items if i.product_id == product_id), None)

    def add(
        self,
        *,
        product_id: str,
        name: str,
        unit_price: float,
        stock: int,
        quantity: int = 1,
        selected_color: str | None = None,
        image_url: str | None = None,
    ) -> CartItem | None:
        if quantity < 1 or stock < 1:
            return None

        existing = self._find(product_id)
        if existing is not None:
            existing.stock = stock
            existing.quantity = min(existing.quantity + quantity, stock)
            return existing

        item = CartItem(
            product_id=product_id,
            name=name,
            unit_price=unit_price,
            quantity=min(quantity, stock),
            stock=stock,
            selected_color=selected_color,
            image_url=image_url,
        )
        self._items.append(item)
        return item

    def remove(self, product_id: str) -> None:
        self._items = [i for i in self._items if i.product_id != product_id]

    def update_quantity(self, product_id: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove(product_id)
            return

        item = self._find(product_id)
        if item is not None:
            item.quantity = min(quantity, item.stock)

    def clear(self) -> None:
        self._items = []

    def contains(self, product_id: str) -> bool:
        return self._find(product_id) is not None

    def quantity_of(self, product_id: str) -> int:
        item = self._find(product_id)
        return item.quantity if item is not None else 0

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def total_items(self) -> int:
        return sum(i.quantity for i in self._items)

    @property
    def total_price(self) -> float:
        return sum((i.line_total for i in self._items), 0.0)

    def snapshot(self) -> list[OrderLineV1]:
        return [
            OrderLineV1(
                product_id=i.product_id,
                name=i.name,
                unit_price=i.unit_price,
                quantity=i.quantity,
                selected_color=i.selected_color,
                image_url=i.image_url,
            )
            for i in self._items
        ]
