"""Core output dispatchers."""

import json


def pretty_print(data):
    print(json.dumps(data, indent=2, ensure_ascii=False))


def output(data, formatter=None, fmt="table"):
    """Output data in requested format."""
    if fmt == "table" and formatter:
        print(formatter(data))
    else:
        pretty_print(data)


def mutation_response(summary, data=None, fmt="table"):
    """Print a mutation confirmation: "OK: <summary>" or the JSON result."""
    if fmt == "json":
        payload = {"ok": True, "summary": summary}
        if data:
            payload.update({k: v for k, v in data.items() if k != "ok"})
        pretty_print(payload)
        return
    print(f"OK: {summary}")
