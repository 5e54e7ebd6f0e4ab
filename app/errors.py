"""Error taxonomy for the evaluation services.

Services raise these; ``create_app`` turns them into JSON responses.
"""


class ScoringError(Exception):
    status_code = 400
    code = "scoring_error"

    def __init__(self, message=None, **extra):
        super().__init__(message or self.code)
        self.message = message or self.code
        self.extra = extra

    def to_dict(self):
        body = {"error": self.code, "message": self.message}
        body.update({k: v for k, v in self.extra.items() if v is not None})
        return body


class ValidationError(ScoringError):
    code = "validation_error"

    def __init__(self, message, field=None, bound=None, limit=None):
        super().__init__(message, field=field, bound=bound, limit=limit)
        self.field = field
        self.bound = bound
        self.limit = limit


class AccessDenied(ScoringError):
    """Raised for bad tokens and out-of-scope records alike.

    The message is fixed so callers cannot tell which check failed.
    """
    status_code = 403
    code = "access_denied"

    def __init__(self):
        super().__init__("access denied")


class NotFound(ScoringError):
    status_code = 404
    code = "not_found"


class CapacityError(ScoringError):
    status_code = 409
    code = "capacity_exhausted"
