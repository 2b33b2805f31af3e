"""Postman API client used for the collection upload."""

import requests
from requests.adapters import HTTPAdapter

from postman_publisher.errors import UploadError

from .retry import RetryPolicy

UPLOAD_TIMEOUT = 30


def single_connection_session() -> requests.Session:
    """Session limited to one pooled connection, with keep-alive disabled."""
    session = requests.Session()
    adapter = HTTPAdapter(pool_connections=1, pool_maxsize=1, pool_block=True)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers["Connection"] = "close"
    return session


class PostmanClient:
    """Creates collections through the Postman API (create-only)."""

    def __init__(
        self,
        api_key: str,
        api_base: str,
        session: requests.Session | None = None,
        retry: RetryPolicy | None = None,
    ):
        self.api_key = api_key
        self.api_base = api_base.rstrip("/")
        self.session = session or single_connection_session()
        self.retry = retry or RetryPolicy(retry_on=(UploadError,))

    def headers(self) -> dict[str, str]:
        return {
            "X-Api-Key": self.api_key,
            "Content-Type": "application/json",
        }

    def create_collection(self, payload: dict, workspace_id: str) -> str:
        """POST ``payload`` (``{"collection": ...}``) and return the response body."""
        url = f"{self.api_base}/collections"
        return self.retry.call(lambda: self._post(url, payload, {"workspace": workspace_id}))

    def _post(self, url: str, payload: dict, params: dict) -> str:
        try:
            resp = self.session.post(
                url,
                params=params,
                headers=self.headers(),
                json=payload,
                timeout=UPLOAD_TIMEOUT,
            )
        except requests.exceptions.RequestException as e:
            raise UploadError(None, str(e)) from e

        if not resp.ok:
            raise UploadError(resp.status_code, resp.text)
        return resp.text

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "PostmanClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
