"""
Cart service for the client-local shopping cart

The cart lives in a single key-value slot as one JSON array and every
mutation rewrites the whole value. Two writers sharing the slot (two
browser tabs, two processes on one storage file) are not coordinated:
the last write wins and the other writer's changes are lost.
"""

import logging
from decimal import Decimal
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union

from pydantic import TypeAdapter, ValidationError

from storefront.core.config import settings
from storefront.core.exceptions import StorageError
from storefront.core.storage import KeyValueStorage
from storefront.schemas.cart import CartLine, CartSummary
from storefront.utils.helpers import to_decimal

logger = logging.getLogger(__name__)

CartListener = Callable[[str, List[CartLine]], None]

_cart_adapter = TypeAdapter(List[CartLine])


class CartStore:
    """
    Service for managing cart operations
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        storage_key: Optional[str] = None,
        gst_rate: Union[Decimal, str, None] = None
    ):
        self.storage = storage
        self.storage_key = storage_key or settings.CART_STORAGE_KEY
        self.gst_rate = to_decimal(gst_rate if gst_rate is not None else settings.GST_RATE)
        self._listeners: List[CartListener] = []

    def subscribe(self, listener: CartListener) -> None:
        """
        Register a change listener

        Listeners get the event name ("added", "removed", "updated",
        "cleared") and the cart as persisted.
        """
        self._listeners.append(listener)

    def unsubscribe(self, listener: CartListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def get_cart(self) -> List[CartLine]:
        """
        Read the persisted cart; a missing or unreadable snapshot is an empty cart
        """
        try:
            return self._load()
        except StorageError as e:
            logger.warning(f"Cart storage read failed, using empty cart: {e}")
            return []

    def add_to_cart(self, line: Union[CartLine, Mapping[str, Any]]) -> List[CartLine]:
        """
        Add a line or increase the quantity of the matching (id, finish) line
        """
        new_line = self._normalize_line(line)
        cart, writable = self._load_for_update()

        existing = self._find(cart, new_line.id, new_line.finish)
        if existing:
            existing.quantity += new_line.quantity
        else:
            cart.append(new_line)

        self._save(cart, "added", persist=writable)
        return cart

    def remove_from_cart(self, item_id: str, finish: str) -> List[CartLine]:
        """
        Remove every line matching (item_id, finish); a miss changes nothing
        """
        current, writable = self._load_for_update()
        cart = [
            item for item in current
            if not (item.id == item_id and item.finish == finish)
        ]
        if len(cart) == len(current):
            return cart

        self._save(cart, "removed", persist=writable)
        return cart

    def update_cart_quantity(self, item_id: str, finish: str, quantity: int) -> List[CartLine]:
        """
        Set the quantity of a line; zero or less removes it
        """
        cart, writable = self._load_for_update()
        item = self._find(cart, item_id, finish)

        if not item:
            return cart

        if quantity <= 0:
            return self.remove_from_cart(item_id, finish)

        item.quantity = quantity
        self._save(cart, "updated", persist=writable)
        return cart

    def clear_cart(self) -> List[CartLine]:
        """Empty the cart"""
        self._save([], "cleared")
        return []

    def get_cart_count(self) -> int:
        return sum(item.quantity for item in self.get_cart())

    def get_cart_total(self) -> Decimal:
        """Sum of price * quantity, unrounded"""
        return sum((item.price * item.quantity for item in self.get_cart()), Decimal("0"))

    def calculate_gst(self, subtotal: Union[Decimal, int, float, str]) -> Decimal:
        return to_decimal(subtotal) * self.gst_rate

    def get_cart_summary(self) -> CartSummary:
        """
        Calculate cart totals for presentation
        """
        cart = self.get_cart()
        subtotal = sum((item.line_total for item in cart), Decimal("0"))
        gst = self.calculate_gst(subtotal)

        return CartSummary(
            item_count=sum(item.quantity for item in cart),
            subtotal=subtotal,
            gst=gst,
            total=subtotal + gst
        )

    @staticmethod
    def _find(cart: List[CartLine], item_id: str, finish: str) -> Optional[CartLine]:
        for item in cart:
            if item.id == item_id and item.finish == finish:
                return item
        return None

    @staticmethod
    def _normalize_line(line: Union[CartLine, Mapping[str, Any]]) -> CartLine:
        # quantity falls back to 1 and finish to "default" when missing or empty
        data = line.model_dump() if isinstance(line, CartLine) else dict(line)
        data["quantity"] = data.get("quantity") or 1
        data["finish"] = data.get("finish") or "default"
        return CartLine.model_validate(data)

    def _load(self) -> List[CartLine]:
        """Stored cart; raises StorageError when the slot cannot be read"""
        raw = self.storage.get(self.storage_key)
        if not raw:
            return []

        try:
            return _cart_adapter.validate_json(raw)
        except ValidationError:
            logger.warning("Stored cart could not be parsed, treating it as empty")
            return []

    def _load_for_update(self) -> Tuple[List[CartLine], bool]:
        """
        Cart to mutate and whether the result may be written back

        After a failed read the stored snapshot is unknown, so it must not
        be overwritten.
        """
        try:
            return self._load(), True
        except StorageError as e:
            logger.warning(f"Cart storage read failed, change will not be saved: {e}")
            return [], False

    def _save(self, cart: List[CartLine], event: str, persist: bool = True) -> None:
        if persist:
            try:
                self.storage.set(self.storage_key, _cart_adapter.dump_json(cart).decode("utf-8"))
            except StorageError as e:
                logger.error(f"Failed to persist cart: {e}")

        for listener in list(self._listeners):
            try:
                listener(event, cart)
            except Exception as e:
                logger.error(f"Cart listener failed on {event}: {e}")
