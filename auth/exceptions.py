"""Typed exceptions for auth failures."""


class AuthError(Exception):
    """Base class for authentication/authorization errors."""


class InvalidTokenError(AuthError):
    """
    Token signature or structure is invalid.

    Malformed or forged tokens will never validate; the caller must log in.
    """


class TokenExpiredError(InvalidTokenError):
    """
    Token signature is valid but its expiry has passed.

    Subclass of InvalidTokenError so boundary code can treat both the same.
    Kept distinct for diagnostics only.
    """


class NotAuthenticatedError(AuthError):
    """
    Request carries no usable bearer token.

    The message is safe to show: it never says whether a token expired
    or was forged.
    """


class InvalidCredentialsError(AuthError):
    """
    Login failed.

    Raised for both unknown email and wrong password so responses
    don't reveal whether an account exists.
    """


class UserNotFoundError(AuthError):
    """
    Account referenced by an authenticated identity no longer exists.

    Note: In user-facing login responses, don't reveal whether email exists.
    This exception is for account mutation paths only.
    """


class WrongPasswordError(AuthError):
    """Current password did not match during an account mutation."""


class WeakPasswordError(AuthError):
    """New password does not meet the minimum length."""

    def __init__(self, min_length: int):
        self.min_length = min_length
        super().__init__(f"New password must be at least {min_length} characters")


class AlreadyRegisteredError(AuthError):
    """Registration attempted with an email that already has an account."""


class EmailTakenError(AuthError):
    """
    Email is already used by another account.

    Raised by the account store when its uniqueness guarantee rejects a write.
    """
