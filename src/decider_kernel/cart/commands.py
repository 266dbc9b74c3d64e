"""
Shopping Cart Commands - what clients ask a cart to do

Dispatchers parse Command.data into these models, so a malformed payload
surfaces as a pydantic ValidationError from dispatch().
"""

from datetime import datetime

from pydantic import BaseModel, Field

# Command type tags
OPEN_SHOPPING_CART = "OpenShoppingCart"
ADD_PRODUCT_ITEM = "AddProductItemToShoppingCart"
REMOVE_PRODUCT_ITEM = "RemoveProductItemFromShoppingCart"
CONFIRM_SHOPPING_CART = "ConfirmShoppingCart"
CANCEL_SHOPPING_CART = "CancelShoppingCart"


class OpenShoppingCart(BaseModel):
    shopping_cart_id: str = Field(..., min_length=1)
    client_id: str = Field(..., min_length=1)
    now: datetime


class AddProductItemToShoppingCart(BaseModel):
    shopping_cart_id: str = Field(..., min_length=1)


class RemoveProductItemFromShoppingCart(BaseModel):
    shopping_cart_id: str = Field(..., min_length=1)


class ConfirmShoppingCart(BaseModel):
    """Confirm the cart; ``now`` becomes the confirmation timestamp"""

    shopping_cart_id: str = Field(..., min_length=1)
    now: datetime


class CancelShoppingCart(BaseModel):
    """Cancel the cart; ``now`` becomes the cancellation timestamp"""

    shopping_cart_id: str = Field(..., min_length=1)
    now: datetime
