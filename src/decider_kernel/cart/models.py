"""
Shopping Cart Models - the lifecycle states of a cart

A cart is a tagged variant: Empty until opened, Pending while items are
added or removed, Closed once confirmed or canceled. Each variant is a
frozen pydantic model so reducers can only ever build new states.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class EmptyCart(BaseModel):
    """A cart nobody has opened yet"""

    status: Literal["Empty"] = "Empty"

    model_config = {"frozen": True}


class PendingCart(BaseModel):
    """An open cart collecting product items"""

    status: Literal["Pending"] = "Pending"
    product_items: int = 0

    model_config = {"frozen": True}


class ClosedCart(BaseModel):
    """A confirmed or canceled cart - no further changes apply"""

    status: Literal["Closed"] = "Closed"

    model_config = {"frozen": True}


ShoppingCart = Annotated[
    Union[EmptyCart, PendingCart, ClosedCart],
    Field(discriminator="status"),
]
