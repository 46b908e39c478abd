# core/completion_client.py
from typing import Optional

import requests

from .errors import CompletionError
from .settings import API_BASE_URL, MODEL, REQUEST_TIMEOUT, TOKEN_ENV, api_token


def _api_error_message(r: requests.Response) -> str:
    try:
        body = r.json()
    except ValueError:
        return ""
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return str(body["error"].get("message") or "")
    return ""


class CompletionClient:
    """Single-turn chat completions with deterministic sampling."""

    def __init__(
        self,
        token: Optional[str] = None,
        model: str = MODEL,
        base_url: str = API_BASE_URL,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self._token = token
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def _resolve_token(self) -> str:
        token = self._token or api_token()
        if not token:
            raise CompletionError(f"Authentication failed: set {TOKEN_ENV} to your API key")
        return token

    def request_body(self, prompt: str) -> dict:
        return {
            "model": self.model,
            "temperature": 0,
            "messages": [{"role": "user", "content": prompt}],
        }

    def complete(self, prompt: str) -> str:
        token = self._resolve_token()
        try:
            r = self.session.post(
                f"{self.base_url}/chat/completions",
                json=self.request_body(prompt),
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise CompletionError(f"Completion request timed out after {self.timeout:g}s") from e
        except requests.RequestException as e:
            raise CompletionError(f"Completion request failed: {e.__class__.__name__}") from e

        if r.status_code == 401:
            raise CompletionError(f"Authentication failed: check {TOKEN_ENV}")
        if not 200 <= r.status_code < 300:
            detail = _api_error_message(r)
            message = f"Completion API returned HTTP {r.status_code}"
            raise CompletionError(f"{message}: {detail}" if detail else message)

        try:
            content = r.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise CompletionError("Malformed completion response") from e
        if not isinstance(content, str):
            raise CompletionError("Malformed completion response")
        return content.strip()
