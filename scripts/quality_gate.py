"""Run ruff, mypy and pytest for mataho-cli and print one JSON report.

Usage:
    python scripts/quality_gate.py              # everything
    python scripts/quality_gate.py --skip-tests # lint + types only
    python scripts/quality_gate.py --fix        # let ruff fix what it can first
"""

from __future__ import annotations

import argparse
import json
import re
import subprocess
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent

# Modules checked by mypy; the MCP server is left out since `mcp` is optional.
MYPY_TARGETS = [
    "mataho_cli/_utils.py",
    "mataho_cli/api.py",
    "mataho_cli/client.py",
    "mataho_cli/config.py",
    "mataho_cli/dispatch.py",
    "mataho_cli/exceptions.py",
    "mataho_cli/formatters/",
    "mataho_cli/groups.py",
    "mataho_cli/matching.py",
    "mataho_cli/models.py",
    "mataho_cli/types.py",
]

_PY = [sys.executable, "-m"]


def _run(cmd: list[str]) -> subprocess.CompletedProcess:
    return subprocess.run(cmd, capture_output=True, text=True, cwd=str(ROOT), timeout=300)


def _count(text: str, pattern: str) -> int:
    return sum(1 for line in text.splitlines() if re.search(pattern, line))


def _check(cmd: list[str], pattern: str, key: str, use_stderr: bool = False) -> dict:
    """Run one tool; count offending lines matching *pattern* on failure."""
    t0 = time.monotonic()
    r = _run(cmd)
    text = r.stderr + r.stdout if use_stderr else r.stdout
    result: dict = {
        "status": "pass" if r.returncode == 0 else "fail",
        key: _count(text, pattern) if r.returncode != 0 else 0,
        "duration_s": round(time.monotonic() - t0, 1),
    }
    if r.returncode != 0:
        result["output"] = text.strip()[-2000:]
    return result


def check_pytest() -> dict:
    t0 = time.monotonic()
    r = _run(_PY + ["pytest", "tests/", "-q", "--no-header", "--tb=short"])
    # Summary line looks like "3 failed, 85 passed in 1.2s".
    lines = reversed(r.stdout.splitlines())
    summary = next((line for line in lines if re.search(r"\d+ (passed|failed)", line)), "")
    passed = re.search(r"(\d+) passed", summary)
    failed = re.search(r"(\d+) failed", summary)
    result: dict = {
        "status": "pass" if r.returncode == 0 else "fail",
        "passed": int(passed.group(1)) if passed else 0,
        "failed": int(failed.group(1)) if failed else 0,
        "duration_s": round(time.monotonic() - t0, 1),
    }
    if r.returncode != 0:
        result["output"] = r.stdout.strip()[-2000:]
    return result


def main() -> None:
    parser = argparse.ArgumentParser(description="Run all quality checks")
    parser.add_argument("--skip-tests", action="store_true", help="Skip pytest")
    parser.add_argument("--fix", action="store_true", help="Auto-fix ruff issues first")
    args = parser.parse_args()

    t0 = time.monotonic()
    if args.fix:
        _run(_PY + ["ruff", "check", "--fix", "."])

    checks: dict[str, dict] = {}
    print("Running ruff lint...", file=sys.stderr)
    checks["ruff_lint"] = _check(_PY + ["ruff", "check", "."], r"^\S+:\d+:\d+:", "errors")
    print("Running ruff format...", file=sys.stderr)
    checks["ruff_format"] = _check(
        _PY + ["ruff", "format", "--check", "."], r"^Would reformat", "files", use_stderr=True
    )
    print("Running mypy...", file=sys.stderr)
    checks["mypy"] = _check(_PY + ["mypy"] + MYPY_TARGETS, r": error:", "errors")
    if args.skip_tests:
        checks["pytest"] = {"status": "skip", "reason": "--skip-tests"}
    else:
        print("Running pytest...", file=sys.stderr)
        checks["pytest"] = check_pytest()

    ok = all(c["status"] in ("pass", "skip") for c in checks.values())
    report = {
        "overall": "pass" if ok else "fail",
        "checks": checks,
        "total_duration_s": round(time.monotonic() - t0, 1),
    }
    print(json.dumps(report, indent=2))
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
