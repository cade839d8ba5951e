from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Iterable, List, Optional


async def read_json(path: Path, default: Any = None) -> Any:
    def _read() -> Any:
        try:
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except FileNotFoundError:
            return default

    return await asyncio.to_thread(_read)


async def read_text(path: Path, errors: str = "strict") -> Optional[str]:
    def _read() -> Optional[str]:
        try:
            with path.open("r", encoding="utf-8", errors=errors) as handle:
                return handle.read()
        except FileNotFoundError:
            return None

    return await asyncio.to_thread(_read)


async def list_files(root: Path) -> List[Path]:
    """Recursively list regular files under root, in sorted order."""
    def _walk() -> List[Path]:
        if not root.is_dir():
            raise NotADirectoryError(str(root))
        return sorted(path for path in root.rglob("*") if path.is_file())

    return await asyncio.to_thread(_walk)


async def ensure_dirs(paths: Iterable[Path]) -> None:
    def _mkdir() -> None:
        for path in paths:
            path.mkdir(parents=True, exist_ok=True)

    await asyncio.to_thread(_mkdir)
