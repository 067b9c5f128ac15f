"""Error taxonomy shared by services and mapped to HTTP responses in ``wipshare.main``.

Validation and quota failures are expected, user-facing outcomes and carry
their full detail to the client. Storage and identity failures are
infrastructure faults: they are logged where they happen and reach the
client as opaque messages.
"""


class WipShareError(Exception):
    status_code = 500
    error = "Internal server error"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict:
        return {"error": self.error, "message": self.message}


class RequestValidationFailed(WipShareError):
    status_code = 400
    error = "Validation failed"

    def __init__(self, details: list[dict]):
        self.details = details
        super().__init__(", ".join(d["message"] for d in details))

    def to_body(self) -> dict:
        return {"error": self.error, "message": self.message, "details": self.details}


class QuotaExceeded(WipShareError):
    status_code = 403
    error = "Upload limit reached"

    def __init__(self, reason: str, *, dimension: str | None = None, feature: str | None = None):
        super().__init__(reason)
        self.dimension = dimension
        self.feature = feature

    def to_body(self) -> dict:
        body = super().to_body()
        if self.dimension:
            body["dimension"] = self.dimension
        if self.feature:
            body["feature"] = self.feature
        return body


class StorageError(WipShareError):
    status_code = 502
    error = "Storage unavailable"

    def to_body(self) -> dict:
        return {"error": self.error, "message": "The storage backend could not complete the request"}


class IdentityError(WipShareError):
    status_code = 401
    error = "Invalid token"

    def to_body(self) -> dict:
        return {"error": self.error, "message": "Please provide a valid authentication token"}


class Forbidden(WipShareError):
    status_code = 403
    error = "Forbidden"


class NotFound(WipShareError):
    status_code = 404
    error = "Not found"
