from __future__ import annotations
from pathlib import Path
import fcntl
from typing import Any, Dict, FrozenSet, Optional
import yaml

from modrouter.configuration.engine_config import (
    DEFAULT_APP_NAME,
    DEFAULT_APP_VERSION,
    DEFAULT_PROJECT_URL,
    EngineConfig,
)
from modrouter.datatypes.privilege_datatypes import PrivilegeTier
from modrouter.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("./config/app_config.yml").resolve()

# Keys under ``roles:`` in the YAML file, mapped to the tier they grant
ROLE_KEYS: Dict[str, PrivilegeTier] = {
    "trial_moderator": PrivilegeTier.TRIAL,
    "moderator": PrivilegeTier.MODERATOR,
    "senior_moderator": PrivilegeTier.SENIOR_MODERATOR,
    "manager": PrivilegeTier.MANAGER,
}


class AppConfig:
    """File-lock based accessor around the YAML application configuration.

    The class caches the contents of ``./config/app_config.yml`` and exposes
    typed views of the sections the router needs: application details for
    informational replies, staff role identifiers per tier, and the channel
    that receives moderation reports.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                data = yaml.safe_load(f)
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except FileNotFoundError:
            logger.error("[APP CONFIGURATION] Config file %s not found.", self.config_path)
            return {}
        except (OSError, yaml.YAMLError) as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return {}

        if not isinstance(data, dict):
            if data is not None:
                logger.error("[APP CONFIGURATION] Config %s is not a mapping; ignoring it.", self.config_path)
            return {}
        return data

    def _section(self, key: str) -> Dict[str, Any]:
        value = self._data.get(key, {})
        return value if isinstance(value, dict) else {}

    # --------------------------
    # Public API
    # --------------------------
    def reload(self) -> Dict[str, Any]:
        """Reload configuration from disk and return the loaded mapping.

        Returns the raw mapping that was loaded (an empty dict on error).
        """
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        """Return the current cached configuration mapping.

        Callers should not mutate it; use get(...) or the typed properties.
        """
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Safe lookup for top-level configuration keys."""
        return self._data.get(key, default)

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def engine_config(self) -> EngineConfig:
        """Return the application details as an immutable EngineConfig.

        Missing or empty values fall back to the packaged defaults.
        """
        application = self._section("application")
        return EngineConfig(
            app_name=str(application.get("name") or DEFAULT_APP_NAME),
            app_version=str(application.get("version") or DEFAULT_APP_VERSION),
            project_url=str(application.get("url") or DEFAULT_PROJECT_URL),
        )

    @property
    def tier_roles(self) -> Dict[PrivilegeTier, FrozenSet[str]]:
        """Return the role identifiers that grant each staff tier.

        Each ``roles`` entry may be a single role id, a role name, or a list
        of either. Identifiers are normalised to stripped strings so they can
        be compared against the role set of an inbound message.
        """
        roles = self._section("roles")
        mapping: Dict[PrivilegeTier, FrozenSet[str]] = {}

        for key, tier in ROLE_KEYS.items():
            value = roles.get(key)
            if value is None:
                continue
            values = value if isinstance(value, list) else [value]
            identifiers = frozenset(str(item).strip() for item in values if str(item).strip())
            if identifiers:
                mapping[tier] = identifiers

        unknown = set(roles) - set(ROLE_KEYS)
        if unknown:
            logger.warning("[APP CONFIGURATION] Ignoring unknown role keys: %s", ", ".join(sorted(unknown)))

        return mapping

    @property
    def commands_channel_id(self) -> Optional[int]:
        """Return the channel id that receives action reports, if configured."""
        value = self._data.get("commands_channel_id")
        if value in (None, ""):
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.error("[APP CONFIGURATION] commands_channel_id %r is not a valid channel id.", value)
            return None


# Shared application-wide configuration instance
app_config = AppConfig(CONFIG_PATH)
