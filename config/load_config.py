from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

from pdb_gateway.models.server import PdbConfig


def load_app_config(path: str = "config/app.yaml") -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {p.resolve()}")

    data = yaml.safe_load(p.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Config must be a YAML mapping (top-level dict).")

    return data


def load_pdb_config(path: str = "config/app.yaml") -> PdbConfig:
    """
    Читает секцию `puppetdb:`:

        puppetdb:
          server_urls:
            - https://pdb1.example.com:8081
            - https://pdb2.example.com:8081
          server_url_timeout: 30
          soft_write_failure: false
    """
    data = load_app_config(path)
    section = data.get("puppetdb")
    if not isinstance(section, dict):
        raise ValueError("Config must contain a 'puppetdb' mapping.")

    return PdbConfig.from_values(
        section.get("server_urls") or [],
        server_url_timeout=section.get("server_url_timeout", 30),
        soft_write_failure=section.get("soft_write_failure", False),
    )
