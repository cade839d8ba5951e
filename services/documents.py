"""
Internal documents used as generation context.

Documents are loaded once at startup and never reloaded.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from core.io_utils import list_files, read_text
from core.paths import resolve_repo_path

logger = logging.getLogger("smartbot.documents")

MAX_RELEVANT_DOCUMENTS = 3
RELEVANCE_CUTOFF = 0.3
MIN_QUERY_WORD_LENGTH = 4


def query_words(query: str) -> set[str]:
    """Case-folded query words longer than three characters."""
    return {word for word in (query or "").lower().split() if len(word) >= MIN_QUERY_WORD_LENGTH}


def relevance(words: set[str], content: str) -> float:
    """Share of query words found as a substring of some document word."""
    if not words:
        return 0.0
    content_words = set(content.lower().split())
    matching = [word for word in words if any(word in candidate for candidate in content_words)]
    return len(matching) / len(words)


def select_relevant(
    query: str,
    documents: Iterable[str],
    limit: int = MAX_RELEVANT_DOCUMENTS,
) -> list[str]:
    """
    Return up to `limit` documents whose relevance exceeds the cutoff.

    Documents keep their iteration order; there is no ranking.
    """
    words = query_words(query)
    if not words:
        return []
    selected: list[str] = []
    for content in documents:
        if relevance(words, content) > RELEVANCE_CUTOFF:
            selected.append(content)
            if len(selected) >= limit:
                break
    return selected


class DocumentStore:
    """Maps file path to text for every loaded internal document."""

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self.base_dir = base_dir
        self.documents: dict[str, str] = {}
        self.failed_sources: list[str] = []

    def __len__(self) -> int:
        return len(self.documents)

    def _resolve(self, source: str) -> Path:
        if self.base_dir is None:
            return resolve_repo_path(source)
        return resolve_repo_path(source, base=self.base_dir)

    async def load(self, sources: Iterable[str]) -> dict[str, str]:
        """
        Recursively read every file under each source directory.

        Invalid UTF-8 is decoded with replacement characters. Missing
        sources and unreadable files are logged and skipped.
        """
        for source in sources:
            root = self._resolve(source)
            try:
                files = await list_files(root)
            except OSError as e:
                logger.error("Error loading internal data from %s: %s", root, e)
                self.failed_sources.append(str(root))
                continue

            for path in files:
                try:
                    content = await read_text(path, errors="replace")
                except OSError as e:
                    logger.error("Failed to read internal file %s: %s", path, e)
                    self.failed_sources.append(str(path))
                    continue
                if content is not None:
                    self.documents[str(path)] = content

        logger.info("Loaded %d internal documents", len(self.documents))
        return self.documents

    def select_relevant(self, query: str, limit: int = MAX_RELEVANT_DOCUMENTS) -> list[str]:
        return select_relevant(query, self.documents.values(), limit=limit)
