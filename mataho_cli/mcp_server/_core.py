"""Core helpers: client caching, _call dispatcher, response contract."""

from __future__ import annotations

from mataho_cli import CliError, MatahoClient, SetupError

_client: MatahoClient | None = None


def _get_client() -> MatahoClient:
    """Return a cached MatahoClient, creating one on first use.

    The device snapshot is fetched once per client, so a long-running
    server sees the device list from its first call.
    """
    global _client
    if _client is None:
        _client = MatahoClient()
    return _client


def _contract_error(message: str, error_type: str = "error", labels=None) -> dict:
    """Return a stable MCP error envelope."""
    payload = {"ok": False, "type": error_type, "error": message}
    if labels:
        payload["labels"] = list(labels)
    return payload


def _finalize_tool_result(result, key: str | None = None) -> dict:
    """Wrap list results under *key*; add ok=True to successful dicts."""
    if isinstance(result, dict):
        out = dict(result)
        out.setdefault("ok", True)
        return out
    return {"ok": True, key or "data": result}


_ALLOWED_METHODS = {
    "list_devices",
    "get_device",
    "exec_device",
    "list_groups",
    "create_group",
    "delete_group",
    "add_to_group",
    "remove_from_group",
    "exec_group",
}


def _call(method_name: str, **kwargs):
    """Call a MatahoClient method, converting exceptions to error dicts."""
    if method_name not in _ALLOWED_METHODS:
        return _contract_error(f"Unknown method: {method_name}", "error")
    try:
        client = _get_client()
        return getattr(client, method_name)(**kwargs)
    except SetupError as e:
        return _contract_error(str(e), "setup")
    except CliError as e:
        return _contract_error(str(e), e.error_type, getattr(e, "labels", None))
    except Exception as e:
        return _contract_error(f"Unexpected error: {e}", "error")
