from __future__ import annotations

from dataclasses import dataclass

DEFAULT_APP_NAME = "Modrouter"
DEFAULT_APP_VERSION = "0.1.0"
DEFAULT_PROJECT_URL = "https://github.com/misterveiga/cds"


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Immutable application details rendered into informational replies."""

    app_name: str = DEFAULT_APP_NAME
    app_version: str = DEFAULT_APP_VERSION
    project_url: str = DEFAULT_PROJECT_URL
