"""
Shopping Cart Reducer - fold cart events into cart state

Every function is pure and total: an event arriving in a lifecycle phase
where it makes no sense leaves the cart unchanged rather than failing, so
any recorded history can always be replayed.
"""

from decider_kernel.cart.events import (
    PRODUCT_ITEM_ADDED,
    PRODUCT_ITEM_REMOVED,
    SHOPPING_CART_CANCELED,
    SHOPPING_CART_CONFIRMED,
    SHOPPING_CART_OPENED,
)
from decider_kernel.cart.models import ClosedCart, EmptyCart, PendingCart, ShoppingCart
from decider_kernel.kernel.events import Event


def initial_state() -> ShoppingCart:
    return EmptyCart()


def on_opened(cart: ShoppingCart, event: Event) -> ShoppingCart:
    if not isinstance(cart, EmptyCart):
        return cart
    return PendingCart(product_items=0)


def on_item_added(cart: ShoppingCart, event: Event) -> ShoppingCart:
    if not isinstance(cart, PendingCart):
        return cart
    return cart.model_copy(update={"product_items": cart.product_items + 1})


def on_item_removed(cart: ShoppingCart, event: Event) -> ShoppingCart:
    if not isinstance(cart, PendingCart):
        return cart
    return cart.model_copy(update={"product_items": cart.product_items - 1})


def on_closed(cart: ShoppingCart, event: Event) -> ShoppingCart:
    """Confirmation and cancellation both close a pending cart"""
    if not isinstance(cart, PendingCart):
        return cart
    return ClosedCart()


reducer = {
    SHOPPING_CART_OPENED: on_opened,
    PRODUCT_ITEM_ADDED: on_item_added,
    PRODUCT_ITEM_REMOVED: on_item_removed,
    SHOPPING_CART_CONFIRMED: on_closed,
    SHOPPING_CART_CANCELED: on_closed,
}
