"""Default callable producers.

`SiteFunctions` reads site state from the option store and the execution
context. Its bound methods are the producers registered in the callables
whitelist (see `get_callable_whitelist`).

URL producers normalize the scheme through a short per-callable history kept
in the ``sync_https_history_<callable>`` options.
"""

from __future__ import annotations

import logging
import platform as _platform
from collections.abc import Callable
from typing import Any

from sitesync.domain.urls import normalize_url_protocol
from sitesync.interfaces.context import ExecutionContext
from sitesync.interfaces.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)

HTTPS_CHECK_OPTION_PREFIX = "sync_https_history_"
DEFAULT_LOCALE = "en_US"

_OFFSET_MINUTES = {".25": ":15", ".5": ":30", ".75": ":45"}


class SiteFunctions:
    """Producers of site state.

    Stores are looked up on ``uow`` at call time, so a single instance can be
    used across several ``with uow:`` blocks.
    """

    def __init__(self, uow: AbstractUnitOfWork, context: ExecutionContext) -> None:
        self.uow = uow
        self.context = context

    # --- URLs ---

    def home_url(self) -> str | None:
        return self._normalized_url("home_url", self.uow.options.get("home"))

    def site_url(self) -> str | None:
        return self._normalized_url("site_url", self.uow.options.get("siteurl"))

    def main_network_site(self) -> str | None:
        url = self.uow.options.get("main_network_site_url") or self.uow.options.get(
            "siteurl"
        )
        return self._normalized_url("main_network_site_url", url)

    def _normalized_url(self, callable_name: str, url: str | None) -> str | None:
        if not url:
            return None
        option_name = HTTPS_CHECK_OPTION_PREFIX + callable_name
        history = self.uow.options.get(option_name, [])
        if not isinstance(history, list):
            history = []
        normalized, new_history = normalize_url_protocol(url, history)
        self.uow.options.update(option_name, new_history)
        return normalized

    # --- code ---

    def active_modules(self) -> list[str]:
        return list(self.uow.options.get("active_modules") or [])

    def active_plugins(self) -> list[str]:
        return list(self.uow.options.get("active_plugins") or [])

    def get_plugins(self) -> dict[str, Any]:
        return dict(self.uow.options.get("plugins") or {})

    def paused_plugins(self) -> dict[str, Any]:
        return dict(self.uow.options.get("paused_plugins") or {})

    def paused_themes(self) -> dict[str, Any]:
        return dict(self.uow.options.get("paused_themes") or {})

    def active_theme(self) -> str | None:
        return self.uow.options.get("stylesheet")

    # --- settings ---

    def timezone(self) -> str:
        """Return the timezone name, or ``UTC+H[:MM]`` from the GMT offset."""
        if timezone_string := self.uow.options.get("timezone_string"):
            return str(timezone_string)

        try:
            offset = float(self.uow.options.get("gmt_offset") or 0)
        except (TypeError, ValueError):
            logger.warning("Ignoring non-numeric gmt_offset option")
            offset = 0.0

        text = f"{offset:+g}"
        for fraction, minutes in _OFFSET_MINUTES.items():
            if text.endswith(fraction):
                text = text[: -len(fraction)] + minutes
                break
        return f"UTC{text}"

    def locale(self) -> str:
        return self.uow.options.get("locale") or DEFAULT_LOCALE

    def site_icon_url(self) -> str | None:
        return self.uow.options.get("site_icon_url")

    def roles(self) -> dict[str, Any]:
        return dict(self.uow.options.get("user_roles") or {})

    # --- environment ---

    def is_multisite(self) -> bool:
        return self.context.is_multisite()

    @staticmethod
    def runtime_version() -> str:
        return _platform.python_version()

    @staticmethod
    def platform() -> str:
        return _platform.system().lower()

    # --- network (multisite only) ---

    def network_name(self) -> str | None:
        return self.uow.options.get("network_site_name")

    def network_allow_new_registrations(self) -> str:
        return self.uow.options.get("network_registration") or "none"

    def network_add_new_users(self) -> bool:
        return bool(self.uow.options.get("network_add_new_users"))

    def network_site_upload_space(self) -> int:
        try:
            return int(self.uow.options.get("network_blog_upload_space") or 100)
        except (TypeError, ValueError):
            return 100

    def network_upload_file_types(self) -> str:
        return self.uow.options.get("network_upload_filetypes") or "jpg jpeg png gif"

    def network_enable_administration_menus(self) -> dict[str, Any]:
        return dict(self.uow.options.get("network_menu_items") or {})


def get_callable_whitelist(site: SiteFunctions) -> dict[str, Callable[[], Any]]:
    """Return the base whitelist, in evaluation order."""
    return {
        "home_url": site.home_url,
        "site_url": site.site_url,
        "main_network_site": site.main_network_site,
        "active_modules": site.active_modules,
        "active_plugins": site.active_plugins,
        "get_plugins": site.get_plugins,
        "paused_plugins": site.paused_plugins,
        "paused_themes": site.paused_themes,
        "active_theme": site.active_theme,
        "timezone": site.timezone,
        "locale": site.locale,
        "site_icon_url": site.site_icon_url,
        "roles": site.roles,
        "is_multisite": site.is_multisite,
        "runtime_version": site.runtime_version,
        "platform": site.platform,
    }


def get_multisite_callable_whitelist(
    site: SiteFunctions,
) -> dict[str, Callable[[], Any]]:
    """Return the callables only sent by multisite networks."""
    return {
        "network_name": site.network_name,
        "network_allow_new_registrations": site.network_allow_new_registrations,
        "network_add_new_users": site.network_add_new_users,
        "network_site_upload_space": site.network_site_upload_space,
        "network_upload_file_types": site.network_upload_file_types,
        "network_enable_administration_menus": site.network_enable_administration_menus,
    }
