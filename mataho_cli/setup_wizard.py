"""
Interactive setup wizard for mataho-cli.
Guides users through the gateway address and API token, then writes config.json.
"""

from mataho_cli import config
from mataho_cli.api import GatewayApi, _mask_token, _try_call
from mataho_cli.exceptions import CliError, SetupError
from mataho_cli.models import DeviceSnapshot

# ---------------------------------------------------------------------------
# Prompt helpers
# ---------------------------------------------------------------------------


def _prompt(label, default=None):
    suffix = f" [{default}]" if default not in (None, "") else ""
    value = input(f"{label}{suffix}: ").strip()
    return value or (default if default is not None else "")


def _prompt_hostname(default):
    while True:
        value = _prompt("Gateway address", default)
        if value:
            if "://" not in value:
                value = "https://" + value
            return value.rstrip("/")
        print("  Address cannot be empty. Try again.")


def _prompt_port(default):
    while True:
        value = _prompt("Port", str(default))
        try:
            port = int(value)
        except ValueError:
            port = 0
        if 0 < port < 65536:
            return port
        print("  Port must be a number between 1 and 65535.")


def _prompt_token(existing):
    for _attempt in range(3):
        hint = f" (Enter keeps {_mask_token(existing)})" if existing else ""
        value = input(f"API token{hint}: ").strip().strip('"').strip("'")
        if value:
            if value.lower().startswith("bearer "):
                value = value[7:].strip()
            return value
        if existing:
            return existing
        print("  Token cannot be empty. Try again.")
    print("  No token entered. Saving a placeholder; re-run setup to set it.")
    return config.PLACEHOLDER_TOKEN


def _check_connection(configuration):
    """Try fetching the device list; returns the device count or None."""
    setup = _try_call(GatewayApi(configuration).get_setup)
    if setup is None:
        return None
    snapshot = _try_call(DeviceSnapshot.from_setup, setup)
    return len(snapshot) if snapshot is not None else None


# ---------------------------------------------------------------------------
# Main wizard
# ---------------------------------------------------------------------------


def cmd_setup(providers):
    """Prompt for hostname, port and token; write config.json."""
    config_dir = config.find_config_dir(providers)
    path = config_dir / config.CONFIG_FILENAME

    print()
    print("=" * 56)
    print("  mataho-cli setup wizard")
    print("=" * 56)
    print()

    existing = None
    if path.is_file():
        try:
            existing = config.load_config(path)
            print(f"Existing configuration found at {path}")
            print(f"  Gateway:  {existing.base_url}")
            print(f"  Token:    {_mask_token(existing.api_token)}")
            print()
        except SetupError as e:
            print(f"Existing configuration is unreadable, starting over.\n  {e}\n")
    current = existing or config.Configuration()

    print("Enable the local API (developer mode) for your box, then generate a token")
    print("from your account. The gateway address usually looks like")
    print("  https://gateway-XXXX-XXXX-XXXX.local  (port 8443)")
    print()

    configuration = config.Configuration(
        hostname=_prompt_hostname(current.hostname),
        port=_prompt_port(current.port),
        api_token=_prompt_token(existing.api_token if existing else ""),
        groups=current.groups,
    )
    try:
        config.save_config(path, configuration)
    except OSError as e:
        raise CliError(f"[ERROR] Failed to write {path}: {e}") from e
    print(f"  Saved: {path}")
    print()

    print("Checking the connection...")
    count = _check_connection(configuration)
    if count is None:
        print("  Could not reach the gateway. Check the address, port and token,")
        print("  then run: mataho list")
    else:
        print(f"  Connected! {count} device(s) found. Try: mataho list")
    print()
