# portal/adapters/clients/credentials.py
from __future__ import annotations

from ...config import Settings, settings as default_settings
from ...domain.errors import ConfigurationFault
from ...domain.parsing import is_blank
from ...domain.types import Credentials

REQUIRED = ("VAULTRE_API_URL", "VAULTRE_API_TOKEN", "VAULTRE_API_KEY")


def credential_presence(cfg: Settings | None = None) -> dict[str, bool]:
    """Which of the required values are set. Safe to expose; never returns the values."""
    cfg = cfg or default_settings
    return {
        "apiUrl": not is_blank(cfg.VAULTRE_API_URL),
        "apiToken": not is_blank(cfg.VAULTRE_API_TOKEN),
        "apiKey": not is_blank(cfg.VAULTRE_API_KEY),
    }


def resolve_credentials(cfg: Settings | None = None) -> Credentials:
    cfg = cfg or default_settings
    missing = [name for name in REQUIRED if is_blank(getattr(cfg, name))]
    if missing:
        raise ConfigurationFault(missing)

    return Credentials(
        base_url=str(cfg.VAULTRE_API_URL).strip().rstrip("/"),
        token=str(cfg.VAULTRE_API_TOKEN).strip(),
        api_key=str(cfg.VAULTRE_API_KEY).strip(),
    )
