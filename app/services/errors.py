"""
Domain errors raised by the service layer.
main.py turns any DomainError into a JSON response with its status code.
"""


class DomainError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidDateRangeError(DomainError):
    status_code = 400


class InvalidAdminError(DomainError):
    status_code = 400


class UnknownUserError(DomainError):
    status_code = 400


class AuthenticationFailedError(DomainError):
    status_code = 401


class NotFoundError(DomainError):
    status_code = 404


class ConflictError(DomainError):
    status_code = 409
