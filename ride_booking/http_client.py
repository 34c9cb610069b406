# ride_booking/http_client.py
import json
import requests
from typing import Any, Dict, Optional


def _require_2xx(resp: requests.Response, url: str) -> None:
    # raise_for_status lets a final 3xx through
    resp.raise_for_status()
    if not 200 <= resp.status_code <= 299:
        raise requests.HTTPError(f"{resp.status_code} response from {url}", response=resp)


class HttpClient:
    def __init__(self, timeout_sec: int):
        self.timeout_sec = timeout_sec

    def get_json(self, url: str, params: Dict[str, Any], headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        resp = requests.get(url, params=params, headers=headers, timeout=self.timeout_sec)
        _require_2xx(resp, url)
        return resp.json()

    def post(self, url: str, data: str, headers: Optional[Dict[str, str]] = None,
             timeout: Optional[float] = None) -> requests.Response:
        """Raw POST; the caller inspects status and body itself."""
        return requests.post(url, data=data, headers=headers, timeout=timeout or self.timeout_sec)

    def post_json(self, url: str, payload: Dict[str, Any], headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        all_headers = {"Content-Type": "application/json"}
        all_headers.update(headers or {})
        resp = self.post(url, data=json.dumps(payload), headers=all_headers)
        _require_2xx(resp, url)
        return resp.json()
