"""
Shopping Cart Handlers - Command→Event decisions

Each handler:
1. Parses the command payload (pydantic raises on malformed data)
2. Checks the cart is in a status that allows the command
3. Returns the event(s) describing what happened

Handlers never touch state - the kernel folds the returned events.
Timestamps come from the command's ``now`` so decisions stay deterministic.
"""

from decider_kernel.cart.commands import (
    ADD_PRODUCT_ITEM,
    CANCEL_SHOPPING_CART,
    CONFIRM_SHOPPING_CART,
    OPEN_SHOPPING_CART,
    REMOVE_PRODUCT_ITEM,
    AddProductItemToShoppingCart,
    CancelShoppingCart,
    ConfirmShoppingCart,
    OpenShoppingCart,
    RemoveProductItemFromShoppingCart,
)
from decider_kernel.cart.errors import CartNotInStatus, NoProductItemsToRemove
from decider_kernel.cart.events import (
    PRODUCT_ITEM_ADDED,
    PRODUCT_ITEM_REMOVED,
    SHOPPING_CART_CANCELED,
    SHOPPING_CART_CONFIRMED,
    SHOPPING_CART_OPENED,
    ProductItemAddedToShoppingCart,
    ProductItemRemovedFromShoppingCart,
    ShoppingCartCanceled,
    ShoppingCartConfirmed,
    ShoppingCartOpened,
)
from decider_kernel.cart.models import EmptyCart, PendingCart, ShoppingCart
from decider_kernel.kernel.events import Command, Event, create_event


def _require_pending(cart: ShoppingCart, shopping_cart_id: str) -> PendingCart:
    if not isinstance(cart, PendingCart):
        raise CartNotInStatus(shopping_cart_id, cart.status, "Pending")
    return cart


def handle_open(cart: ShoppingCart, command: Command) -> list[Event]:
    cmd = OpenShoppingCart.model_validate(command.data)
    if not isinstance(cart, EmptyCart):
        raise CartNotInStatus(cmd.shopping_cart_id, cart.status, "Empty")

    payload = ShoppingCartOpened(
        shopping_cart_id=cmd.shopping_cart_id,
        client_id=cmd.client_id,
        opened_at=cmd.now,
    ).model_dump(mode="json")
    return [create_event(SHOPPING_CART_OPENED, payload)]


def handle_add_item(cart: ShoppingCart, command: Command) -> list[Event]:
    cmd = AddProductItemToShoppingCart.model_validate(command.data)
    _require_pending(cart, cmd.shopping_cart_id)

    payload = ProductItemAddedToShoppingCart(
        shopping_cart_id=cmd.shopping_cart_id,
    ).model_dump(mode="json")
    return [create_event(PRODUCT_ITEM_ADDED, payload)]


def handle_remove_item(cart: ShoppingCart, command: Command) -> list[Event]:
    cmd = RemoveProductItemFromShoppingCart.model_validate(command.data)
    pending = _require_pending(cart, cmd.shopping_cart_id)
    if pending.product_items <= 0:
        raise NoProductItemsToRemove(cmd.shopping_cart_id)

    payload = ProductItemRemovedFromShoppingCart(
        shopping_cart_id=cmd.shopping_cart_id,
    ).model_dump(mode="json")
    return [create_event(PRODUCT_ITEM_REMOVED, payload)]


def handle_confirm(cart: ShoppingCart, command: Command) -> Event:
    cmd = ConfirmShoppingCart.model_validate(command.data)
    _require_pending(cart, cmd.shopping_cart_id)

    payload = ShoppingCartConfirmed(
        shopping_cart_id=cmd.shopping_cart_id,
        confirmed_at=cmd.now,
    ).model_dump(mode="json")
    return create_event(SHOPPING_CART_CONFIRMED, payload)


def handle_cancel(cart: ShoppingCart, command: Command) -> Event:
    cmd = CancelShoppingCart.model_validate(command.data)
    _require_pending(cart, cmd.shopping_cart_id)

    payload = ShoppingCartCanceled(
        shopping_cart_id=cmd.shopping_cart_id,
        canceled_at=cmd.now,
    ).model_dump(mode="json")
    return create_event(SHOPPING_CART_CANCELED, payload)


dispatcher = {
    OPEN_SHOPPING_CART: handle_open,
    ADD_PRODUCT_ITEM: handle_add_item,
    REMOVE_PRODUCT_ITEM: handle_remove_item,
    CONFIRM_SHOPPING_CART: handle_confirm,
    CANCEL_SHOPPING_CART: handle_cancel,
}
