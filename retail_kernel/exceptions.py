"""
Typed Exception Hierarchy for the Retail Kernel.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from RetailKernelError:

    RetailKernelError (base)
    |
    +-- NotFoundError
    |   +-- ProductNotFoundError
    |   +-- BundleNotFoundError
    |   +-- CustomerNotFoundError
    |   +-- OrderNotFoundError
    |   +-- ExpenseNotFoundError
    |
    +-- InsufficientStockError
    +-- InsufficientPointsError
    |
    +-- InvalidRequestError
    |   +-- DuplicatePhoneError
    |
    +-- TransactionConflictError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                   | When Raised
----------------|------------------------|----------------------------------------
Not found       | PRODUCT_NOT_FOUND      | Product ID doesn't resolve
                | BUNDLE_NOT_FOUND       | Bundle ID doesn't resolve
                | CUSTOMER_NOT_FOUND     | Customer ID doesn't resolve
                | ORDER_NOT_FOUND        | Order ID doesn't resolve
                | EXPENSE_NOT_FOUND      | Expense ID doesn't resolve
----------------|------------------------|----------------------------------------
Stock           | INSUFFICIENT_STOCK     | Required quantity exceeds stock
----------------|------------------------|----------------------------------------
Points          | INSUFFICIENT_POINTS    | Redeem/transfer/reversal exceeds balance
----------------|------------------------|----------------------------------------
Request         | INVALID_REQUEST        | Malformed input, self-transfer,
                |                        | unknown target status
                | DUPLICATE_PHONE        | Customer phone already registered
----------------|------------------------|----------------------------------------
Store           | TRANSACTION_CONFLICT   | Backing store aborted the transaction

===============================================================================
HANDLING PATTERNS
===============================================================================

    try:
        run_transaction(lambda s: OrderService(s).create_order(request))
    except InsufficientStockError as e:
        return {"error": e.code, "product": e.product_name,
                "required": e.required, "available": e.available}
    except NotFoundError as e:
        return {"error": e.code, "message": str(e)}

Every error is raised inside the transaction before any offending write
is flushed; the transaction scope rolls back and re-raises.  Nothing in
the kernel retries.  TransactionConflictError is the one error a client
may reasonably retry.
"""


class RetailKernelError(Exception):
    """
    Base exception for all retail kernel errors.

    All subclasses carry a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "RETAIL_KERNEL_ERROR"


# Lookup failures


class NotFoundError(RetailKernelError):
    """Base exception for unresolved references."""

    code: str = "NOT_FOUND"


class ProductNotFoundError(NotFoundError):
    """Product with given ID was not found."""

    code: str = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


class BundleNotFoundError(NotFoundError):
    """Bundle (package) with given ID was not found."""

    code: str = "BUNDLE_NOT_FOUND"

    def __init__(self, bundle_id: str):
        self.bundle_id = bundle_id
        super().__init__(f"Bundle not found: {bundle_id}")


class CustomerNotFoundError(NotFoundError):
    """Customer with given ID was not found."""

    code: str = "CUSTOMER_NOT_FOUND"

    def __init__(self, customer_id: str):
        self.customer_id = customer_id
        super().__init__(f"Customer not found: {customer_id}")


class OrderNotFoundError(NotFoundError):
    """Order with given ID was not found."""

    code: str = "ORDER_NOT_FOUND"

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}")


class ExpenseNotFoundError(NotFoundError):
    """Expense with given ID was not found."""

    code: str = "EXPENSE_NOT_FOUND"

    def __init__(self, expense_id: str):
        self.expense_id = expense_id
        super().__init__(f"Expense not found: {expense_id}")


# Balance failures


class InsufficientStockError(RetailKernelError):
    """
    A product does not have enough stock for the requested quantity.

    ``bundle_name`` is set when the shortfall was found while expanding a
    bundle line into its component products.
    """

    code: str = "INSUFFICIENT_STOCK"

    def __init__(
        self,
        product_id: str,
        product_name: str,
        required: int,
        available: int,
        bundle_name: str | None = None,
    ):
        self.product_id = product_id
        self.product_name = product_name
        self.required = required
        self.available = available
        self.bundle_name = bundle_name
        where = f" in bundle {bundle_name}" if bundle_name else ""
        super().__init__(
            f"Insufficient stock for {product_name}{where}: "
            f"required {required}, available {available}"
        )


class InsufficientPointsError(RetailKernelError):
    """A customer's points balance cannot cover the requested debit."""

    code: str = "INSUFFICIENT_POINTS"

    def __init__(self, customer_id: str, required: int, available: int):
        self.customer_id = customer_id
        self.required = required
        self.available = available
        super().__init__(
            f"Customer {customer_id} has insufficient points: "
            f"required {required}, available {available}"
        )


# Request failures


class InvalidRequestError(RetailKernelError):
    """Request is semantically invalid."""

    code: str = "INVALID_REQUEST"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid request: {reason}")


class DuplicatePhoneError(InvalidRequestError):
    """A customer with this phone number already exists."""

    code: str = "DUPLICATE_PHONE"

    def __init__(self, phone: str):
        self.phone = phone
        super().__init__(f"phone number already registered: {phone}")


# Store failures


class TransactionConflictError(RetailKernelError):
    """
    The backing store aborted the transaction (deadlock, serialization
    failure, lock timeout).  The whole transaction was rolled back.
    """

    code: str = "TRANSACTION_CONFLICT"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Transaction aborted by the store: {detail}")
