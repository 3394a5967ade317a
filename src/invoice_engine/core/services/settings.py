from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path

logger = logging.getLogger(__name__)

SETTINGS_PATH = Path(__file__).resolve().parents[2] / "data" / "settings.json"
SETTINGS_ENV = "INVOICE_ENGINE_SETTINGS"


@dataclass(frozen=True)
class EngineSettings:
    """Defaults applied by the command line when a flag is not given."""

    template: str = "classic"
    language: str = "en"
    qr_enabled: bool = True
    output_dir: str = "."
    labels_path: str = ""


def settings_path(path: str | Path | None = None) -> Path:
    if path:
        return Path(path)
    override = os.environ.get(SETTINGS_ENV)
    if override:
        return Path(override)
    return SETTINGS_PATH


def load_settings(path: str | Path | None = None) -> EngineSettings:
    """
    Load settings JSON; missing file or unknown keys fall back to defaults.
    """
    target = settings_path(path)
    if not target.exists():
        return EngineSettings()
    try:
        data = json.loads(target.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Using default settings, cannot read %s: %s", target, exc)
        return EngineSettings()
    if not isinstance(data, dict):
        logger.warning("Using default settings, %s is not a JSON object", target)
        return EngineSettings()
    known = {f.name for f in fields(EngineSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning("Ignoring unknown settings: %s", ", ".join(unknown))
    values = {k: v for k, v in data.items() if k in known}
    if "qr_enabled" in values:
        values["qr_enabled"] = bool(values["qr_enabled"])
    for key in ("template", "language", "output_dir", "labels_path"):
        if key in values:
            values[key] = str(values[key] or "")
    return EngineSettings(**values)
