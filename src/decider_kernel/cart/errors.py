"""
Shopping Cart Errors - commands the cart's lifecycle does not allow
"""

from decider_kernel.kernel.errors import InvariantViolation


class CartNotInStatus(InvariantViolation):
    """Raised when a cart command requires a lifecycle status the cart is not in"""

    def __init__(self, shopping_cart_id: str, current_status: str, required_status: str) -> None:
        self.shopping_cart_id = shopping_cart_id
        self.current_status = current_status
        self.required_status = required_status
        super().__init__(
            f"Shopping cart {shopping_cart_id} is {current_status}, "
            f"must be {required_status} for this operation"
        )


class NoProductItemsToRemove(InvariantViolation):
    """Raised when removing a product item from a cart that holds none"""

    def __init__(self, shopping_cart_id: str) -> None:
        self.shopping_cart_id = shopping_cart_id
        super().__init__(f"Shopping cart {shopping_cart_id} has no product items to remove")
