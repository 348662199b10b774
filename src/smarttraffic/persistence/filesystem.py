"""File-based persistence helpers for the report log."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterator

from ..config import settings


class FileStorage:
    """Thin wrapper around the data root for JSON and JSON Lines files."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or settings.data_root).resolve()
        self.reports_root = self.root / "reports"
        self.reports_root.mkdir(parents=True, exist_ok=True)

    @property
    def report_log(self) -> Path:
        return self.reports_root / "reports.jsonl"

    def append_jsonl(self, path: Path, record: dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, ensure_ascii=False))
            handle.write("\n")

    def read_jsonl(self, path: Path) -> Iterator[dict[str, Any]]:
        if not path.exists():
            return
        with path.open("r", encoding="utf-8") as handle:
            for line_number, line in enumerate(handle, start=1):
                if not line.strip():
                    continue
                try:
                    yield json.loads(line)
                except json.JSONDecodeError as e:
                    logging.warning(f"Skipping corrupt line {line_number} in {path.name}: {e}")
