class DomainError(Exception):
    status_code = 500
    default_message = "internal server error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class NotFoundError(DomainError):
    status_code = 404
    default_message = "not found"


class ForbiddenError(DomainError):
    status_code = 403
    default_message = "You are not authorized to access this resource"


class UnauthorizedError(DomainError):
    status_code = 401
    default_message = "unauthorized"


class BadRequestError(DomainError):
    status_code = 400
    default_message = "bad request"


class ConflictError(DomainError):
    status_code = 409
    default_message = "conflict"


class InternalError(DomainError):
    status_code = 500


# 外部サービス (object storage / payment gateway) の失敗
class ExternalServiceError(InternalError): ...
class StorageError(ExternalServiceError): ...
class PaymentGatewayError(ExternalServiceError): ...
