# cartguard/errors.py


class ExtensionError(Exception):
    """Base for every failure that is rendered into the extension error envelope."""

    status_code: int = 500
    code: str = "General"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_envelope(self) -> dict:
        return {"errors": [{"code": self.code, "message": self.message}]}


class BadRequest(ExtensionError):
    status_code = 400
    code = "InvalidInput"


class BusinessRuleRejection(ExtensionError):
    status_code = 400
    code = "InvalidOperation"


class UnrecognizedAction(ExtensionError):
    status_code = 500
    code = "General"


class InternalFault(ExtensionError):
    status_code = 500
    code = "General"


class Unauthorized(ExtensionError):
    status_code = 401
    code = "Unauthorized"
