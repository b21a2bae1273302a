import requests

from .errors import UpstreamRejected, UpstreamUnavailable

DEFAULT_PATH = '/api/bot/respond'


class ResponderClient:
    """HTTP client for the automated responder service.

    POSTs ``{text, session_id}`` and expects ``{reply}`` back. Transport
    failures raise ``UpstreamUnavailable``; non-2xx answers raise
    ``UpstreamRejected``. Nothing is retried.
    """

    def __init__(self, base_url, path=DEFAULT_PATH, timeout=10.0, http=None):
        self.base_url = (base_url or '').rstrip('/')
        self.path = path if path.startswith('/') else f"/{path}"
        self.timeout = timeout
        self.http = http or requests.Session()

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.path}"

    def respond(self, text: str, session_id: str) -> str:
        if not self.base_url:
            raise UpstreamUnavailable('responder URL is not configured')
        try:
            resp = self.http.post(
                self.url,
                json={'text': text, 'session_id': session_id},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise UpstreamUnavailable(str(exc)) from exc
        if not resp.ok:
            raise UpstreamRejected(resp.status_code)
        try:
            data = resp.json()
        except ValueError as exc:
            raise UpstreamUnavailable('responder returned a non-JSON body') from exc
        reply = data.get('reply') if isinstance(data, dict) else None
        if not isinstance(reply, str):
            raise UpstreamUnavailable('responder body has no reply')
        return reply
