"""
HTTP request layer for the gateway's local API.
"""

import json
import re
import ssl
import sys
import time
import urllib.error
import urllib.request
import uuid

from mataho_cli import config
from mataho_cli.exceptions import CliError, HTTPError, RemoteError

# ---------------------------------------------------------------------------
# Security helpers
# ---------------------------------------------------------------------------


def _mask_token(token):
    """Show only first 6 chars of a token for safe logging."""
    return token[:6] + "..." if len(token) > 6 else token


def _sanitize_error(body, max_len=500):
    """Truncate and clean error body for safe display."""
    if not body:
        return ""
    cleaned = re.sub(r"<[^>]+>", "", body)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    if len(cleaned) > max_len:
        return cleaned[:max_len] + "... [truncated]"
    return cleaned


def _try_call(fn, *args, **kwargs):
    """Call a function that might raise CliError, returning None on failure."""
    try:
        return fn(*args, **kwargs)
    except CliError:
        return None


def _insecure_context():
    """Gateway boxes serve self-signed certificates."""
    ctx = ssl.create_default_context()
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    return ctx


# ---------------------------------------------------------------------------
# HTTP request layer
# ---------------------------------------------------------------------------


def _log_http_event(**fields):
    """Emit structured HTTP logs to stderr when enabled."""
    if not config.HTTP_LOG_ENABLED:
        return
    print("[HTTP] " + json.dumps(fields, ensure_ascii=False, sort_keys=True), file=sys.stderr)


def _error_envelope(message, status=None, request_id=None, detail=None):
    """Build a consistent CLI-safe HTTP error message."""
    meta = []
    if status is not None:
        meta.append(f"status={status}")
    if request_id:
        meta.append(f"request_id={request_id}")
    suffix = f" ({', '.join(meta)})" if meta else ""
    body = f"[ERROR] {message}{suffix}"
    if detail:
        body += f"\n{detail}"
    return body


def _http_request(url, data=None, headers=None, method="GET", context=None):
    """Make a single HTTP request with standard error handling.
    Returns parsed JSON on success (None for an empty body).
    Raises HTTPError for HTTP errors (caller maps them).
    Raises RemoteError on network/timeout/parse errors. No retries."""
    body = json.dumps(data).encode("utf-8") if data is not None else None
    request_id = (headers or {}).get("X-Request-Id")
    timeout = max(1, config.HTTP_TIMEOUT_SECONDS)
    start = time.perf_counter()
    req = urllib.request.Request(url, data=body, headers=headers or {}, method=method)
    _log_http_event(
        phase="request",
        method=method,
        url=url,
        request_id=request_id,
        timeout_seconds=timeout,
        bytes=len(body) if body else 0,
    )
    try:
        with urllib.request.urlopen(req, timeout=timeout, context=context) as resp:
            content_type = resp.headers.get("Content-Type", "")
            raw = resp.read(config.HTTP_MAX_RESPONSE_BYTES + 1)
            _log_http_event(
                phase="response",
                method=method,
                url=url,
                status=getattr(resp, "status", 200),
                content_type=content_type,
                bytes=len(raw),
                latency_ms=round((time.perf_counter() - start) * 1000, 2),
                request_id=request_id,
            )
    except urllib.error.HTTPError as e:
        error_body = (
            e.read(config.HTTP_MAX_RESPONSE_BYTES).decode("utf-8", errors="replace")
            if e.fp
            else ""
        )
        _log_http_event(
            phase="response",
            method=method,
            url=url,
            status=e.code,
            latency_ms=round((time.perf_counter() - start) * 1000, 2),
            request_id=request_id,
        )
        raise HTTPError(e.code, e.reason, error_body, headers=e.headers) from e
    except TimeoutError as e:
        _log_http_event(phase="network_error", method=method, url=url, error="timeout")
        raise RemoteError(
            _error_envelope(
                f"Request timed out after {timeout} seconds. Is the gateway reachable?",
                request_id=request_id,
            )
        ) from e
    except urllib.error.URLError as e:
        _log_http_event(
            phase="network_error", method=method, url=url, error=f"url_error: {e.reason}"
        )
        raise RemoteError(
            _error_envelope(f"Connection failed: {e.reason}", request_id=request_id)
        ) from e

    if len(raw) > config.HTTP_MAX_RESPONSE_BYTES:
        raise RemoteError(
            f"[ERROR] Response too large from gateway (>{config.HTTP_MAX_RESPONSE_BYTES} bytes)."
        )
    if not raw.strip():
        return None
    try:
        return json.loads(raw.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        if content_type and "json" not in content_type.lower():
            raise RemoteError(
                f"[ERROR] Unexpected Content-Type from gateway ({content_type})."
            ) from None
        raise RemoteError("[ERROR] Unexpected response from gateway (not valid JSON).") from None


class GatewayApi:
    """Remote control collaborator: device setup and command execution."""

    def __init__(self, configuration):
        self.base_url = configuration.base_url
        self._token = configuration.api_token
        self._context = _insecure_context()

    def _endpoint(self, path):
        return f"{self.base_url}{config.API_PREFIX}{path}"

    def _headers(self, with_body=False):
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/json",
            "X-Request-Id": str(uuid.uuid4()),
        }
        if with_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _request(self, path, data=None, method="GET", operation="request"):
        try:
            return _http_request(
                self._endpoint(path),
                data,
                self._headers(with_body=data is not None),
                method,
                context=self._context,
            )
        except HTTPError as e:
            if e.code in (401, 403):
                hint = "Check api_token in your configuration (token " + _mask_token(
                    self._token
                ) + ")."
            else:
                hint = _sanitize_error(e.body)
            raise RemoteError(
                _error_envelope(
                    f"{operation} failed: HTTP {e.code}: {e.reason}",
                    status=e.code,
                    detail=hint,
                ),
                status=e.code,
            ) from e

    def get_setup(self):
        """GET /setup. Returns the raw setup payload (a dict)."""
        result = self._request("/setup", operation="Fetching device setup")
        if not isinstance(result, dict):
            raise RemoteError(
                "[ERROR] Unexpected setup response shape: "
                f"expected JSON object, got {type(result).__name__}."
            )
        return result

    def apply(self, payload):
        """POST /exec/apply with a {label, actions} payload."""
        result = self._request(
            "/exec/apply", data=payload, method="POST", operation="Executing command"
        )
        return result if isinstance(result, dict) else {}
