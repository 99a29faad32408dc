"""Configuration manager: load, save and validate the engine configuration.

Uses ruamel.yaml so the written file keeps its section comments.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.defaults import default_engine_config
from config.schema import EngineConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML COMMENTS ───

_YAML_HEADER = f"""\
# ============================================
# Practical Exam Scheduler: engine configuration
# Created: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "capacity": (
        "Capacity",
        "daily_capacity caps every exam date; slot_capacity caps every time slot.",
    ),
    "schedule": (
        "Schedule defaults",
        "Labs and time slots used when a request leaves them out.\n"
        "Slots are filled session by session, lab by lab.",
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "engine_config.yaml"

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else self.DEFAULT_CONFIG

    def first_run_check(self) -> bool:
        """True when no configuration file exists yet."""
        return not self.path.exists()

    # ─── Loading ───

    def load(self, path: Optional[Path] = None) -> EngineConfig:
        """Load the YAML config. Validated through pydantic."""
        target = Path(path) if path is not None else self.path
        if not target.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {target}\n"
                f"Run 'python main.py config init' to create one."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            return EngineConfig.model_validate(dict(raw or {}))
        except Exception as e:
            raise ValueError(
                f"Invalid configuration file: {target}\n"
                f"Pydantic error: {e}"
            ) from e

    def load_or_default(self, path: Optional[Path] = None) -> EngineConfig:
        """Like load(), but falls back to the built-in defaults."""
        target = Path(path) if path is not None else self.path
        if not target.exists():
            return default_engine_config()
        return self.load(target)

    # ─── Saving ───

    def save(self, config: EngineConfig, path: Optional[Path] = None) -> Path:
        """Write the config as commented YAML."""
        target = Path(path) if path is not None else self.path
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Configuration saved: {target}")
        return target

    def _build_commented_yaml(self, config: EngineConfig) -> CommentedMap:
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            if field in cm:
                cm.yaml_set_comment_before_after_key(
                    field,
                    before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
                )
        return cm
