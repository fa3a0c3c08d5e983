"""
Relay error taxonomy.

Domain functions raise these; the JSON API decorator in
views/helpers.py turns them into {"ok": false, "error": ...} responses
with the matching HTTP status.
"""


class RelayError(Exception):
    status = 500
    default_message = "internal error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(RelayError):
    status = 401
    default_message = "unauthorized"


class NotFound(RelayError):
    status = 404
    default_message = "device not found"


class Conflict(RelayError):
    # Duplicate registrations answer 400, same as the HTML forms
    status = 400
    default_message = "already exists"


class BadRequest(RelayError):
    status = 400
    default_message = "bad request"
