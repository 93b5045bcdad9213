"""Client-Konfiguration als kommentierte YAML-Datei (ruamel.yaml).

Fehlt die Datei, gelten die Standardwerte aus ``config.defaults``.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.error import YAMLError

from config.defaults import default_client_config
from config.schema import ClientConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── Kopf und Abschnitte der YAML-Datei ───

_YAML_HEADER = f"""\
# ============================================
# Vorlesungsplaner — Client-Konfiguration
# Angelegt am {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "api": (
        "Generator-Dienst",
        "Basis-URL des Generator-/Validator-Dienstes.\n"
        "Das Zeitlimit pro Anfrage ist fest auf 10 Sekunden gesetzt.",
    ),
    "storage": (
        "Sitzungsspeicher",
        "Letzte Eingabe, letzter Plan und letzte Validierung als JSON.",
    ),
    "log_level": (
        "Logging",
        None,
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "client_config.yaml"

    def first_run_check(self) -> bool:
        """True, solange noch keine Konfigurationsdatei angelegt wurde."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> ClientConfig:
        """Liest und validiert die YAML-Datei."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            raise FileNotFoundError(
                f"Keine Client-Konfiguration unter {target}.\n"
                f"Führen Sie 'python main.py config init' aus, um sie anzulegen."
            )
        try:
            with open(target, "r", encoding="utf-8") as f:
                raw = yaml.load(f)
        except YAMLError as e:
            raise ValueError(f"Client-Konfiguration {target} ist kein gültiges YAML:\n{e}") from e
        if raw is not None and not isinstance(raw, dict):
            raise ValueError(f"Client-Konfiguration {target} muss eine YAML-Zuordnung sein.")
        try:
            return ClientConfig.model_validate(dict(raw or {}))
        except ValidationError as e:
            raise ValueError(
                f"Client-Konfiguration {target} ist ungültig "
                f"({e.error_count()} Fehler):\n{e}"
            ) from e

    def load_or_default(self, path: Optional[Path] = None) -> ClientConfig:
        """Wie ``load``, aber ohne Datei gilt die Standard-Konfiguration."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            return default_client_config()
        return self.load(target)

    # ─── Speichern ───

    def save(self, config: ClientConfig, path: Optional[Path] = None) -> None:
        """Schreibt die Konfiguration samt Abschnittskommentaren."""
        target = path or self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER)
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Client-Konfiguration geschrieben: {target}")

    def _build_commented_yaml(self, config: ClientConfig) -> CommentedMap:
        cm = CommentedMap(json.loads(config.model_dump_json()))

        for key, (title, hint) in _SECTION_COMMENTS.items():
            text = f"\n─── {title} ───"
            if hint:
                text += f"\n{hint}"
            cm.yaml_set_comment_before_after_key(key, before=text)

        if "storage" in cm:
            storage_map = CommentedMap(cm["storage"])
            storage_map.yaml_add_eol_comment("false = nur flüchtig", "enabled")
            cm["storage"] = storage_map

        return cm
