class SessionNotFound(LookupError):
    """The session has already ended or never existed."""

    def __init__(self, session_id):
        super().__init__(f"session {session_id!r} not found")
        self.session_id = session_id


class UpstreamError(Exception):
    """The automated responder could not produce a reply."""


class UpstreamUnavailable(UpstreamError):
    """The responder is unreachable, timed out, or returned an unusable body."""


class UpstreamRejected(UpstreamError):
    """The responder answered with a non-2xx status."""

    def __init__(self, status_code, message=None):
        super().__init__(message or f"responder rejected request with status {status_code}")
        self.status_code = status_code
