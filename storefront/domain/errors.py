# storefront/domain/errors.py
"""
Wyjatki domenowe sklepu.

Dziedzicza po wbudowanych typach (ValueError, LookupError, PermissionError),
wiec routery lapia je tak samo jak wczesniej lapaly ValueError/PermissionError.
"""


class StorefrontError(Exception):
    """Base class for all storefront errors."""


# ---- walidacja (400) ----

class ValidationError(StorefrontError, ValueError):
    pass


class MissingFields(ValidationError):
    def __init__(self, fields):
        self.fields = list(fields)
        super().__init__(f"Please fill out all fields: {', '.join(self.fields)}")


class DuplicateUsername(ValidationError):
    def __init__(self, username: str):
        self.username = username
        super().__init__("Username already exists")


class InvalidTransition(ValidationError):
    def __init__(self, current: str, new: str):
        self.current = current
        self.new = new
        super().__init__(f"Order status cannot change from {current} to {new}")


class BannerLimitReached(ValidationError):
    pass


# ---- brak rekordu (404) ----

class NotFound(StorefrontError, LookupError):
    pass


class CategoryNotFound(NotFound):
    pass


class UserNotFound(NotFound):
    pass


# ---- autoryzacja (401/403) ----

class AuthError(StorefrontError, PermissionError):
    pass


class NotAuthenticated(AuthError):
    pass


class InvalidCredentials(AuthError):
    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class AccountBlocked(AuthError):
    def __init__(self, message: str = "Your account has been blocked. Please contact support."):
        super().__init__(message)


class IncorrectPassword(AuthError):
    def __init__(self, message: str = "Incorrect current password"):
        super().__init__(message)


# ---- wspolbieznosc / storage ----

class ConcurrentUpdate(StorefrontError, RuntimeError):
    pass


class PersistenceError(StorefrontError, RuntimeError):
    """Storage unreachable. Only `StoreAdapter.fetch` lets it out; read and write swallow it."""
