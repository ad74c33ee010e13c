"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  2xxx: Category
  3xxx: Transaction
  4xxx: Query (pagination, date ranges)
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Invalid or expired token", 401)


# --- 2xxx: Category ---

class CategoryNotFoundError(AppError):
    def __init__(self, category_id: str) -> None:
        super().__init__(2001, f"Category not found: {category_id}", 404)


class DuplicateCategoryError(AppError):
    def __init__(self, name: str) -> None:
        super().__init__(2002, f"A category named '{name}' already exists", 409)


class InvalidCategoryError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(2003, f"Invalid category: {detail}", 422)


# --- 3xxx: Transaction ---

class TransactionNotFoundError(AppError):
    def __init__(self, kind: str, transaction_id: str) -> None:
        super().__init__(3001, f"{kind.capitalize()} not found: {transaction_id}", 404)


class InvalidTransactionError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3002, f"Invalid transaction: {detail}", 422)


# --- 4xxx: Query ---

class InvalidCursorError(AppError):
    def __init__(self) -> None:
        super().__init__(4001, "Pagination cursor is malformed", 400)


class InvalidDateRangeError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(4002, f"Invalid date range: {detail}", 422)


class InvalidGranularityError(AppError):
    def __init__(self, granularity: str) -> None:
        super().__init__(4003, f"Unsupported granularity: {granularity}", 422)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class StoreError(AppError):
    """Raised at the HTTP edge for any failure reported by the document store."""

    def __init__(self, detail: str = "Data store unavailable") -> None:
        super().__init__(9003, detail, 503)
