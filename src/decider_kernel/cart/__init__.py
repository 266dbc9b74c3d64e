"""
Shopping Cart - a reference decider built on the kernel

Small enough to read in one sitting, complete enough to exercise every
kernel path: single-event and list-returning handlers, lifecycle guards
in both the reducer and the dispatcher, and timestamps carried in
commands. It is also the CLI's default decider.
"""

from decider_kernel.cart.errors import CartNotInStatus, NoProductItemsToRemove
from decider_kernel.cart.handlers import dispatcher
from decider_kernel.cart.models import ClosedCart, EmptyCart, PendingCart, ShoppingCart
from decider_kernel.cart.reducer import initial_state, reducer
from decider_kernel.kernel.aggregate import create_aggregate_factory
from decider_kernel.kernel.decider import Decider

shopping_cart_decider: Decider[ShoppingCart] = Decider(
    reducer=reducer,
    dispatcher=dispatcher,
    initial_state=initial_state,
)

shopping_cart_factory = create_aggregate_factory(shopping_cart_decider)

__all__ = [
    "EmptyCart",
    "PendingCart",
    "ClosedCart",
    "ShoppingCart",
    "CartNotInStatus",
    "NoProductItemsToRemove",
    "shopping_cart_decider",
    "shopping_cart_factory",
]
