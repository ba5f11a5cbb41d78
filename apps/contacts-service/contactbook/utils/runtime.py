"""DEV_MODE: serve every request as one fixed local user.

The dev user owns real rows, so the switch is only honoured on a local base
URL, on a host listed in DEV_MODE_ALLOWED_HOSTS, or with ALLOW_DEV_MODE=true.
"""

import os
from typing import FrozenSet, Optional, Tuple
from urllib.parse import urlsplit

DEV_USER_EMAIL = "dev@localhost"
DEV_USER_NAME = "Development User"

_LOCAL_HOSTS: FrozenSet[str] = frozenset({"localhost", "127.0.0.1", "::1"})


class DevModeMisconfigured(RuntimeError):
    """DEV_MODE is on but the deployment is not local."""


def _env_true(name: str) -> bool:
    return os.getenv(name, "false").strip().lower() == "true"


def dev_mode_requested() -> bool:
    return _env_true("DEV_MODE")


def _base_url_host() -> Optional[str]:
    raw = os.getenv("APP_BASE_URL", "").strip()
    if not raw:
        return None
    # Bare "host:port" values parse as a network location
    host = urlsplit(raw if "://" in raw else f"//{raw}").hostname
    return host.lower() if host else None


def _dev_hosts() -> FrozenSet[str]:
    extra = os.getenv("DEV_MODE_ALLOWED_HOSTS", "")
    return _LOCAL_HOSTS | {h.strip().lower() for h in extra.split(",") if h.strip()}


def dev_identity() -> Optional[Tuple[str, str]]:
    """Return ``(display_name, email)`` of the dev user, or None outside DEV_MODE.

    Raises DevModeMisconfigured when DEV_MODE is requested for a base URL on a
    host that is not permitted, or with no base URL and no explicit opt-in.
    """
    if not dev_mode_requested():
        return None
    host = _base_url_host()
    if host is None:
        if not (_env_true("ALLOW_DEV_MODE") or os.getenv("PYTEST_CURRENT_TEST")):
            raise DevModeMisconfigured(
                "DEV_MODE=true needs a localhost APP_BASE_URL or ALLOW_DEV_MODE=true"
            )
    elif host not in _dev_hosts():
        raise DevModeMisconfigured(f"DEV_MODE=true is not allowed for host '{host}'")
    return DEV_USER_NAME, DEV_USER_EMAIL
