import os, json
from pathlib import Path
from typing import Dict, Any

DEFAULT_PACING = 1.0
DEFAULT_SYSTEM = "lonewolf"
CRT_FILENAME = "combat_result_table.toml"
BUNDLED_DATA = Path(__file__).resolve().parents[1] / "data"


def config_dir() -> Path:
    home = os.getenv("GAMEBOOK_HOME")
    return Path(home) if home else Path.home() / ".gamebook"


def config_path() -> Path:
    return config_dir() / "config.json"


def load_config() -> Dict[str, Any]:
    try:
        return json.loads(config_path().read_text(encoding="utf-8"))
    except Exception:
        return {}


def save_config(cfg: Dict[str, Any]) -> None:
    config_dir().mkdir(parents=True, exist_ok=True)
    config_path().write_text(json.dumps(cfg, indent=2), encoding="utf-8")


def get_pacing(override: float | None = None) -> float:
    """
    Seconds slept around each combat blow. Precedence: override > env > config.
    """
    if override is not None:
        return max(0.0, float(override))
    val = os.getenv("GAMEBOOK_PACING")
    if val is None:
        val = load_config().get("pacing", DEFAULT_PACING)
    try:
        return max(0.0, float(val))
    except (TypeError, ValueError):
        return DEFAULT_PACING


def get_system_name(story_system: str | None, override: str | None = None) -> str:
    # precedence: CLI flag, story document, config, built-in default
    if override:
        return override
    if story_system:
        return story_system
    return str(load_config().get("system") or DEFAULT_SYSTEM)


def find_crt(story_file: Path | None, override: Path | None = None) -> Path:
    """Locate the combat result table for a story.

    Order: explicit override, ``GAMEBOOK_CRT``, config ``crt``, a table next
    to the story file, then the bundled table under ``data/``.
    """
    if override is not None:
        return Path(override)
    env = os.getenv("GAMEBOOK_CRT")
    if env:
        return Path(env)
    cfg = load_config().get("crt")
    if cfg:
        return Path(cfg).expanduser()
    if story_file is not None:
        beside = Path(story_file).resolve().parent / CRT_FILENAME
        if beside.exists():
            return beside
    return BUNDLED_DATA / CRT_FILENAME
