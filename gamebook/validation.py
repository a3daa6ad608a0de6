from __future__ import annotations

from pathlib import Path
from typing import Any
import json
import tomllib
import yaml
from jsonschema import Draft202012Validator
from pydantic import ValidationError

from gamebook.engine.crt import CombatResultTable
from gamebook.errors import LoadError
from gamebook.models.documents import CRTDoc, StoryDoc


SCHEMA_DIR = Path(__file__).resolve().parent / "schemas"

_def_schemas = {
    "story": SCHEMA_DIR / "story.schema.json",
    "crt": SCHEMA_DIR / "crt.schema.json",
}


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def read_document(path: Path) -> Any:
    """Parse a TOML, YAML or JSON file, chosen by suffix (JSON otherwise)."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise LoadError(f"cannot read {path}: {e.strerror or e}", path) from e
    suffix = path.suffix.lower()
    try:
        if suffix == ".toml":
            return tomllib.loads(text)
        if suffix in {".yaml", ".yml"}:
            return yaml.safe_load(text)
        return json.loads(text)
    except (tomllib.TOMLDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise LoadError(f"cannot decode {path}: {e}", path) from e


def _validate_jsonschema(obj: Any, schema_path: Path, path: Path) -> None:
    schema = _read_json(schema_path)
    v = Draft202012Validator(schema)
    errors = sorted(v.iter_errors(obj), key=lambda e: [str(p) for p in e.path])
    if errors:
        lines = []
        for e in errors[:5]:
            ptr = "/" + "/".join([str(p) for p in e.path])
            lines.append(f"- {ptr}: {e.message}")
        more = "" if len(errors) <= 5 else f" (+{len(errors)-5} more)"
        raise LoadError("JSON Schema validation failed:\n" + "\n".join(lines) + more, path)


def _pretty_pydantic(e: ValidationError) -> str:
    lines = []
    for err in e.errors(include_url=False)[:5]:
        loc = "/".join(str(p) for p in err.get("loc", ()))
        lines.append(f"- /{loc}: {err.get('msg')}")
    return "Model validation failed:\n" + "\n".join(lines)


# Public API


def load_story(path: str | Path) -> StoryDoc:
    p = Path(path)
    data = read_document(p)
    _validate_jsonschema(data, _def_schemas["story"], p)
    try:
        return StoryDoc.model_validate(data)
    except ValidationError as e:
        raise LoadError(_pretty_pydantic(e), p) from e


def load_crt(path: str | Path) -> CombatResultTable:
    p = Path(path)
    data = read_document(p)
    _validate_jsonschema(data, _def_schemas["crt"], p)
    try:
        doc = CRTDoc.model_validate(data)
    except ValidationError as e:
        raise LoadError(_pretty_pydantic(e), p) from e
    return CombatResultTable.from_rows(row.model_dump() for row in doc.results)


__all__ = ["load_story", "load_crt", "read_document", "LoadError"]
