"""
Shopping Cart Events - payload schemas for cart facts

Payloads are dumped with ``model_dump(mode="json")`` into Event.data, so
timestamps travel as ISO-8601 strings and a history survives a JSON
round trip unchanged.
"""

from datetime import datetime

from pydantic import BaseModel

# Event type tags
SHOPPING_CART_OPENED = "ShoppingCartOpened"
PRODUCT_ITEM_ADDED = "ProductItemAddedToShoppingCart"
PRODUCT_ITEM_REMOVED = "ProductItemRemovedFromShoppingCart"
SHOPPING_CART_CONFIRMED = "ShoppingCartConfirmed"
SHOPPING_CART_CANCELED = "ShoppingCartCanceled"


class ShoppingCartOpened(BaseModel):
    """A client opened a new cart"""

    shopping_cart_id: str
    client_id: str
    opened_at: datetime


class ProductItemAddedToShoppingCart(BaseModel):
    shopping_cart_id: str


class ProductItemRemovedFromShoppingCart(BaseModel):
    shopping_cart_id: str


class ShoppingCartConfirmed(BaseModel):
    """The client confirmed the cart - it is now closed"""

    shopping_cart_id: str
    confirmed_at: datetime


class ShoppingCartCanceled(BaseModel):
    """The cart was abandoned - it is now closed"""

    shopping_cart_id: str
    canceled_at: datetime


# Event name -> payload schema, usable with decider_kernel.domain.create_domain
CART_EVENTS: dict[str, type[BaseModel]] = {
    SHOPPING_CART_OPENED: ShoppingCartOpened,
    PRODUCT_ITEM_ADDED: ProductItemAddedToShoppingCart,
    PRODUCT_ITEM_REMOVED: ProductItemRemovedFromShoppingCart,
    SHOPPING_CART_CONFIRMED: ShoppingCartConfirmed,
    SHOPPING_CART_CANCELED: ShoppingCartCanceled,
}
