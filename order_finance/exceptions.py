"""Exceptions raised by the order finance package.

Payment and allocation problems are returned as ``ValidationError`` values
(see ``calculations.results``). The exceptions below cover configuration and
storage failures that the caller cannot remediate from the order itself.
"""


class OrderFinanceError(Exception):
    """Base class for all order finance errors."""


class StatusNotFoundError(OrderFinanceError):
    """Raised when a status code is missing from the reference data."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Unknown invoice status: {code}")


class OrderNotFoundError(OrderFinanceError):
    """Raised when an order id is missing from the store."""

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}")


class ConcurrentUpdateError(OrderFinanceError):
    """Raised when the stored order changed between read and write."""

    def __init__(self, order_id: str, expected_version: int):
        self.order_id = order_id
        self.expected_version = expected_version
        super().__init__(
            f"Order {order_id} was modified since version {expected_version}; "
            "reload it and try again"
        )
