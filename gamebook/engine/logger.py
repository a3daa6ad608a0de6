from __future__ import annotations

import json
from pathlib import Path


class SessionLogger:
    """Write a session transcript as parallel JSONL and Markdown files."""

    def __init__(self, path_base: str | Path):
        base = Path(path_base)
        if base.suffix:
            base = base.with_suffix("")
        self.jsonl = base.with_suffix(".jsonl")
        self.md = base.with_suffix(".md")
        self.jsonl.parent.mkdir(parents=True, exist_ok=True)
        # each play starts a fresh transcript
        self.jsonl.write_text("", encoding="utf-8")
        self.md.write_text("", encoding="utf-8")

    def log_event(self, event_type: str, **data) -> None:
        event = {"type": event_type, **data}
        with self.jsonl.open("a", encoding="utf-8") as jf:
            jf.write(json.dumps(event, ensure_ascii=False) + "\n")
        with self.md.open("a", encoding="utf-8") as mf:
            mf.write(self._markdown(event_type, data))

    @staticmethod
    def _markdown(event_type: str, data: dict) -> str:
        if event_type == "narration":
            text = data.get("text") or ""
            return f"\n## {data.get('node')}\n\n{text}\n" if text else f"\n## {data.get('node')}\n"
        if event_type == "choice":
            return f"* choice {data.get('choice')} -> {data.get('next')}\n"
        if event_type == "encounter":
            return f"* encounter {data.get('enemy')} -> {data.get('result')} ({data.get('summary')})\n"
        if event_type == "roll":
            return f"* rolled {data.get('roll')} -> {data.get('next')}\n"
        if event_type == "action":
            return f"* action {data.get('action')}: {data.get('result')}\n"
        if event_type in {"structural_error", "halt"}:
            return f"* **error** at {data.get('node')}: {data.get('error')}\n"
        return f"* {event_type}\n"

    def events(self) -> list[dict]:
        lines = self.jsonl.read_text(encoding="utf-8").splitlines()
        return [json.loads(line) for line in lines if line.strip()]
