"""
mataho-cli shared configuration, constants, and runtime flags.

The config file location is never cached here: callers pass an ordered
tuple of location providers to find_config_dir() at startup.
"""

import json
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from mataho_cli._utils import atomic_write_text
from mataho_cli.exceptions import SetupError

# ---------------------------------------------------------------------------
# Environment helpers
# ---------------------------------------------------------------------------


def _env_bool(key, default=False):
    """Parse common boolean env formats."""
    raw = os.environ.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(key, default):
    """Parse integer env values with fallback."""
    raw = os.environ.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

VERSION = "0.3.0"

APP_NAME = "mataho"
CONFIG_FILENAME = "config.json"
GROUPS_FILENAME = "groups.json"

DEFAULT_HOSTNAME = "https://127.0.0.1"
DEFAULT_PORT = 8443
PLACEHOLDER_TOKEN = "REPLACE_WITH_TOKEN"

API_PREFIX = "/enduser-mobile-web/1/enduserAPI"

# ---------------------------------------------------------------------------
# Runtime state (set by cli.main from global flags / environment)
# ---------------------------------------------------------------------------

HTTP_TIMEOUT_SECONDS = _env_int("MATAHO_HTTP_TIMEOUT_SECONDS", 30)
HTTP_MAX_RESPONSE_BYTES = _env_int("MATAHO_HTTP_MAX_RESPONSE_BYTES", 5_000_000)
HTTP_LOG_ENABLED = _env_bool("MATAHO_HTTP_LOG", False)
RUNTIME_QUIET = False
RUNTIME_VERBOSE = False


def warn(message):
    """Print a [WARN] line on stderr unless --quiet is active."""
    if RUNTIME_QUIET:
        return
    print(f"[WARN] {message}", file=sys.stderr)


# ---------------------------------------------------------------------------
# Config file location providers
# ---------------------------------------------------------------------------


def env_dir_provider(var="MATAHO_CONFIG_DIR"):
    """Provider returning the directory named by an environment variable."""

    def provide():
        value = os.environ.get(var, "").strip()
        return Path(value).expanduser() if value else None

    return provide


def platform_dir_provider():
    """Provider returning the platform's per-user config directory."""

    def provide():
        if os.name == "nt":
            appdata = os.environ.get("APPDATA")
            return Path(appdata) / APP_NAME if appdata else None
        xdg = os.environ.get("XDG_CONFIG_HOME", "").strip()
        if xdg:
            return Path(xdg) / APP_NAME
        return Path.home() / ".config" / APP_NAME

    return provide


def home_dir_provider():
    """Provider returning ~/.mataho."""

    def provide():
        return Path.home() / f".{APP_NAME}"

    return provide


def fixed_dir_provider(path):
    """Provider that always yields *path* (used by --config-dir)."""

    def provide():
        return Path(path).expanduser()

    return provide


def default_providers():
    return (env_dir_provider(), platform_dir_provider(), home_dir_provider())


def find_config_dir(providers):
    """Return the config directory from an ordered tuple of providers.

    The first directory that already holds a config file wins. Otherwise the
    first directory any provider yields is returned, so `setup` knows where
    to write. Raises SetupError if no provider yields anything.
    """
    candidates = []
    for provide in providers:
        directory = provide()
        if directory is None:
            continue
        if (directory / CONFIG_FILENAME).is_file():
            return directory
        candidates.append(directory)
    if not candidates:
        raise SetupError("[SETUP_NEEDED] Could not determine a configuration directory.")
    return candidates[0]


# ---------------------------------------------------------------------------
# Configuration file
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Configuration:
    hostname: str = DEFAULT_HOSTNAME
    port: int = DEFAULT_PORT
    api_token: str = PLACEHOLDER_TOKEN
    groups: list = field(default_factory=list)

    @property
    def base_url(self):
        return f"{self.hostname.rstrip('/')}:{self.port}"

    def to_dict(self):
        data = {"hostname": self.hostname, "port": self.port, "api_token": self.api_token}
        if self.groups:
            data["groups"] = self.groups
        return data


def load_config(path):
    """Read and validate config.json. Raises SetupError on any problem."""
    path = Path(path)
    if not path.is_file():
        raise SetupError(f"[SETUP_NEEDED] No configuration found at {path}.\n  Run: mataho setup")
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise SetupError(f"[SETUP_NEEDED] Failed to read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SetupError(
            f"[SETUP_NEEDED] Failed to parse JSON from {path}: {e.msg} at position {e.pos}"
        ) from e
    if not isinstance(raw, dict):
        raise SetupError(f"[SETUP_NEEDED] {path} must contain a JSON object.")

    missing = [k for k in ("hostname", "port", "api_token") if k not in raw]
    if missing:
        raise SetupError(f"[SETUP_NEEDED] {path} is missing: {', '.join(missing)}")
    try:
        port = int(raw["port"])
    except (TypeError, ValueError) as e:
        raise SetupError(f"[SETUP_NEEDED] Invalid port in {path}: {raw['port']!r}") from e
    groups = raw.get("groups")
    if groups is None:
        groups = []
    if not isinstance(groups, list):
        raise SetupError(f"[SETUP_NEEDED] 'groups' in {path} must be a list.")
    return Configuration(
        hostname=str(raw["hostname"]),
        port=port,
        api_token=str(raw["api_token"]),
        groups=groups,
    )


def save_config(path, configuration):
    """Write config.json atomically and restrict it to the owner."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    atomic_write_text(path, json.dumps(configuration.to_dict(), indent=2) + "\n")
    # Owner-only on Unix/Mac. No-op on Windows.
    try:
        os.chmod(path, 0o600)
    except (OSError, NotImplementedError):
        pass
