import json
import os
import tempfile
from pathlib import Path


def write_json_atomic(path: Path, data) -> None:
    """Write JSON next to ``path`` first, then swap it into place."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="w",
        suffix=".tmp",
        prefix=f"{path.stem}_",
        dir=path.parent,
        delete=False,
        encoding="utf-8",
    ) as fp:
        json.dump(data, fp, ensure_ascii=False, indent=2)
        tmp_path = Path(fp.name)
    try:
        tmp_path.replace(path)
    except OSError:
        os.unlink(tmp_path)
        raise
