class HRISError(Exception):
    """Base error. Rendered as {"error": message, **payload} with status_code."""
    status_code = 500
    default_message = "Internal error"

    def __init__(self, message=None, **payload):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.payload = payload

    def to_dict(self):
        body = {"error": self.message}
        body.update(self.payload)
        return body

class Unauthenticated(HRISError):
    status_code = 401
    default_message = "Authentication required"

class Forbidden(HRISError):
    status_code = 403
    default_message = "Access denied"

class ValidationError(HRISError):
    status_code = 400
    default_message = "Validation failed"

class NotFound(HRISError):
    status_code = 404
    default_message = "Not found"

class ConflictOrAlreadyProcessed(HRISError):
    status_code = 409
    default_message = "Change request not found or already processed"

class StorageFailure(HRISError):
    status_code = 500
    default_message = "Change could not be applied"
