"""Custom exceptions for the retail panel."""


class PanelError(Exception):
    """Base exception for all panel errors."""
    def __init__(self, message="An internal error occurred", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        return rv


class ApiError(PanelError):
    """Raised by the HTTP client when the backend call fails."""
    def __init__(self, message, status_code=None, body=None):
        super().__init__(message, 502, {'upstream_status': status_code} if status_code else None)
        self.upstream_status = status_code
        self.body = body


class LoadError(PanelError):
    """Catalog fetch failed (any of products, stores or users)."""
    def __init__(self, message="Could not load the catalog", payload=None):
        super().__init__(message, 502, payload)


class ValidationError(PanelError):
    """Order draft is not ready to be submitted."""
    def __init__(self, message, payload=None):
        super().__init__(message, 400, payload)


class SubmissionError(PanelError):
    """Order creation failed after validation passed."""
    def __init__(self, message="Failed to create order", payload=None):
        super().__init__(message, 502, payload)


class DeletionError(PanelError):
    """Delete-order call failed."""
    def __init__(self, order_id, reason=None):
        message = f"Failed to delete order #{order_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, 502, {'order_id': order_id})
        self.order_id = order_id


class SchemaError(PanelError):
    """Raised when an entity record has no recognizable identifier field."""
    def __init__(self, entity, fields):
        message = f"{entity} record has none of the identifier fields {', '.join(fields)}"
        super().__init__(message, 502, {'entity': entity})
        self.entity = entity
        self.fields = tuple(fields)


class IllegalTransition(PanelError):
    """Submission state machine was asked for a transition it does not allow."""
    def __init__(self, current, target):
        super().__init__(f"Cannot move from {current.value} to {target.value}", 409)
        self.current = current
        self.target = target
