class AppError(Exception):
    """Base error carrying the HTTP status the API reports for it."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationFailed(AppError):
    status_code = 400


class Unauthorized(AppError):
    status_code = 401


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class GatewayError(AppError):
    status_code = 500


class GatewayRateLimited(GatewayError):
    status_code = 429

    def __init__(self, message: str = "Rate limits exceeded, please try again later."):
        super().__init__(message)


class GatewayPaymentRequired(GatewayError):
    status_code = 402

    def __init__(self, message: str = "Payment required, please add funds to your workspace."):
        super().__init__(message)


class ExternalServiceError(AppError):
    status_code = 502
