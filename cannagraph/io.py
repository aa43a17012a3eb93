from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict, List

def read_json(p: Path) -> Any:
    return json.loads(Path(p).read_text(encoding="utf-8"))

def write_json(p: Path, obj: Any) -> None:
    p = Path(p)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(obj, ensure_ascii=False, indent=2), encoding="utf-8")

def read_jsonl(p: Path) -> List[Dict]:
    """One JSON object per line; blank lines and `//` comment lines are skipped."""
    out = []
    for lineno, line in enumerate(Path(p).read_text(encoding="utf-8").splitlines(), 1):
        line = line.strip()
        if not line or line.startswith("//"):
            continue
        try:
            out.append(json.loads(line))
        except json.JSONDecodeError as e:
            raise ValueError(f"{p}:{lineno}: invalid JSON: {e}")
    return out
