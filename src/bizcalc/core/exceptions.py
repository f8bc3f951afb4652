"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found: {identifier}", code="NOT_FOUND")


class InsufficientLotsError(AppError):
    """Raised when a sale covers more units than the open lots hold."""

    def __init__(self, symbol: str, requested: str, available: str):
        self.symbol = symbol
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient open lots for {symbol}: requested {requested}, available {available}",
            code="INSUFFICIENT_LOTS",
        )


class UnsupportedCostBasisMethodError(AppError):
    """Raised for a cost basis method string that is not recognized."""

    def __init__(self, method: str):
        super().__init__(
            f"Unsupported cost basis method: {method}",
            code="UNSUPPORTED_COST_BASIS_METHOD",
        )


class RiskRejectedError(AppError):
    """Raised when a risk scorer blocks a document."""

    def __init__(self, score: int, threshold: int):
        self.score = score
        self.threshold = threshold
        super().__init__(
            f"Document blocked by risk assessment: score {score} exceeds {threshold}",
            code="RISK_REJECTED",
        )
