from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests


def headers(api_token: Optional[str]) -> Dict[str, str]:
    return {"X-API-TOKEN": api_token} if api_token else {}


def _detail(resp: requests.Response) -> Dict[str, Any]:
    try:
        detail = resp.json().get("detail")
    except ValueError:
        return {"message": resp.text}
    if isinstance(detail, dict):
        return detail
    return {"message": str(detail)}


@dataclass
class ApiResult:
    ok: bool
    status_code: Optional[int] = None
    data: Dict[str, Any] = field(default_factory=dict)
    reason: Optional[str] = None
    message: Optional[str] = None


def _result(resp: requests.Response) -> ApiResult:
    if resp.ok:
        return ApiResult(True, resp.status_code, resp.json())
    detail = _detail(resp)
    return ApiResult(False, resp.status_code, reason=detail.get("reason"), message=detail.get("message"))


def _request(method: str, url: str, api_token: Optional[str], extra_headers: Optional[Dict[str, str]] = None, **kwargs) -> ApiResult:
    request_headers = {**headers(api_token), **(extra_headers or {})}
    try:
        resp = requests.request(method, url, headers=request_headers, timeout=kwargs.pop("timeout", 20), **kwargs)
    except requests.exceptions.RequestException as e:
        return ApiResult(False, reason="network_error", message=str(e))
    return _result(resp)


def check_api_health(api_url: str) -> bool:
    try:
        resp = requests.get(f"{api_url}/health", timeout=5)
        return resp.status_code == 200
    except requests.exceptions.RequestException:
        return False


def start_onboarding(
    api_url: str, api_token: Optional[str], form: Dict[str, Any], accept_language: Optional[str] = None
) -> ApiResult:
    # The API decides on consent from the visitor's locale, not this server's.
    extra = {"Accept-Language": accept_language} if accept_language else {}
    return _request("POST", f"{api_url}/onboarding", api_token, json=form, timeout=30, extra_headers=extra)


def cancel_build(api_url: str, api_token: Optional[str], agent_id: str) -> ApiResult:
    return _request("DELETE", f"{api_url}/builds/{agent_id}", api_token)


def fetch_preview(api_url: str, api_token: Optional[str], company_name: str, description: str) -> ApiResult:
    body = {"companyName": company_name, "businessDescription": description}
    return _request("POST", f"{api_url}/preview", api_token, json=body, timeout=5)


def fetch_enrichment(api_url: str, api_token: Optional[str], website_url: str) -> ApiResult:
    return _request("POST", f"{api_url}/enrich", api_token, json={"websiteUrl": website_url}, timeout=5)


def fetch_agent(api_url: str, api_token: Optional[str], agent_id: str) -> ApiResult:
    return _request("GET", f"{api_url}/agents/{agent_id}", api_token)


def save_agent(api_url: str, api_token: Optional[str], agent_id: str, draft: Dict[str, Any]) -> ApiResult:
    return _request("PATCH", f"{api_url}/agents/{agent_id}", api_token, json=draft, timeout=30)


def preview_narrative(api_url: str, api_token: Optional[str], draft: Dict[str, Any]) -> ApiResult:
    return _request("POST", f"{api_url}/narrative", api_token, json=draft, timeout=5)


def fetch_options(api_url: str, api_token: Optional[str]) -> Dict[str, Any]:
    result = _request("GET", f"{api_url}/options", api_token)
    return result.data if result.ok else {}
