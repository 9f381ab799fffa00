"""
File helpers for JSON documents kept on disk.
"""

import json
import os
from pathlib import Path
from typing import Any


def write_json_atomic(path: Path, document: Any) -> None:
    """
    Write ``document`` as pretty-printed JSON, replacing ``path`` in one step.

    The text goes to a sibling ``.tmp`` file first, so readers never see a
    partially written file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    os.replace(tmp_path, path)
