"""
Admin writes to the remote script endpoint.

Two routes to the endpoint:
- bypass (local dev): POST straight to the script with the token in the body
- proxy (default): POST to the proxy route, which adds the token server-side
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Tuple

import httpx

from .config import Settings
from .errors import AdminError
from .models import AdminResult, CategoryRow
from .rules import ADMIN_ACTIONS

logger = logging.getLogger(__name__)


def validate_row(row: CategoryRow) -> CategoryRow:
    if not row.id.strip() or not row.category.strip():
        raise AdminError("id and category required")
    return row


def build_request(settings: Settings, action: str, payload: Mapping[str, Any]) -> Tuple[str, Dict[str, Any]]:
    """Return (url, json body) for the configured route."""
    if action not in ADMIN_ACTIONS:
        raise AdminError(f"Unknown action: {action}")

    if settings.bypass_proxy:
        if not settings.script_configured:
            raise AdminError("Please set APPS_SCRIPT_ENDPOINT in .env or environment.")
        return settings.apps_script_endpoint, {
            "token": settings.admin_token,
            "action": action,
            "payload": dict(payload),
        }
    return settings.proxy_url, {"action": action, "payload": dict(payload)}


def parse_body(res: httpx.Response) -> Dict[str, Any]:
    text = res.text
    try:
        body = json.loads(text)
    except ValueError:
        return {"raw": text}
    if not isinstance(body, dict):
        return {"raw": body}
    return body


async def send_admin_request(
    settings: Settings,
    client: httpx.AsyncClient,
    action: str,
    payload: Mapping[str, Any],
) -> AdminResult:
    """
    Send one admin action and summarize the reply.

    Remote failures come back as ok=False with a displayable message; only a bad
    action or a missing endpoint raise.
    """
    url, body = build_request(settings, action, payload)
    mode = "direct" if settings.bypass_proxy else "proxy"

    try:
        res = await client.post(url, json=body, timeout=settings.request_timeout, follow_redirects=True)
    except httpx.HTTPError as exc:
        logger.warning("admin %s (%s) failed: %s", action, mode, exc)
        return AdminResult(ok=False, message=str(exc) or exc.__class__.__name__)

    reply = parse_body(res)
    if not res.is_success:
        message = reply.get("error") or "Request failed"
        logger.warning("admin %s (%s) rejected with status %s: %s", action, mode, res.status_code, message)
        return AdminResult(ok=False, message=str(message), payload=reply)

    logger.info("admin %s (%s) ok", action, mode)
    return AdminResult(ok=True, message=str(reply.get("message") or "Success"), payload=reply)


async def forward_to_script(
    settings: Settings,
    client: httpx.AsyncClient,
    action: str,
    payload: Mapping[str, Any],
) -> Tuple[int, Dict[str, Any]]:
    """Proxy side: add the admin token and relay the script's status and body."""
    if not settings.script_configured:
        raise AdminError("APPS_SCRIPT_ENDPOINT is not configured.")

    body = {"token": settings.admin_token, "action": action, "payload": dict(payload)}
    try:
        res = await client.post(settings.apps_script_endpoint, json=body, timeout=settings.request_timeout, follow_redirects=True)
    except httpx.HTTPError as exc:
        logger.warning("proxy %s failed: %s", action, exc)
        return 502, {"error": str(exc) or exc.__class__.__name__}

    return res.status_code, parse_body(res)
