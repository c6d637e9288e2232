"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Ledger
  3xxx: Round
  4xxx: Bet
  5xxx: Funding
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


# --- 1xxx: Auth/User ---

class UsernameExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Username already exists", 409)


class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Email already exists", 409)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid username or password", 401)


class AccountDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Account is disabled", 403)


class InvalidRefreshTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1005, "Refresh token is invalid or expired", 401)


class UserNotFoundError(AppError):
    def __init__(self, username: str) -> None:
        super().__init__(1006, f"User not found: {username}", 404)


class AdminRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1007, "Admin privileges required", 403)


# --- 2xxx: Ledger ---

class InsufficientFundsError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient funds: required {required} cents, available {available} cents",
            422,
        )


class AccountNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(2002, f"Account not found for user {user_id}", 404)


# --- 3xxx: Round ---

class RoundClosedError(AppError):
    def __init__(self, period: int) -> None:
        super().__init__(3001, f"Betting is closed for period {period}", 422)


class TooLateError(AppError):
    def __init__(self, countdown: int, cutoff: int) -> None:
        super().__init__(
            3002,
            f"Too late to set the result: {countdown}s remaining, must be above {cutoff}s",
            422,
        )


class AlreadyResolvedError(AppError):
    def __init__(self, period: int) -> None:
        super().__init__(3003, f"Result already set for period {period}", 409)


# --- 4xxx: Bet ---

class InvalidBetError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(4001, f"Invalid bet: {detail}", 422)


# --- 5xxx: Funding ---

class FundingRequestNotFoundError(AppError):
    def __init__(self, kind: str, request_id: str) -> None:
        super().__init__(5001, f"{kind} request not found: {request_id}", 404)


class FundingRequestProcessedError(AppError):
    def __init__(self, kind: str, request_id: str, status: str) -> None:
        super().__init__(
            5002, f"{kind} request {request_id} already processed (status={status})", 409
        )


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
