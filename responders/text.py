"""
Tokenizing and normalizing helpers for phrase matching.
"""
from __future__ import annotations

import re
from typing import Optional

from nltk.stem import PorterStemmer
from nltk.tokenize import RegexpTokenizer

WHITESPACE_RE = re.compile(r"\s+")

_tokenizer = RegexpTokenizer(r"\w+")
_stemmer = PorterStemmer()


def tokenize(text: str) -> list[str]:
    """Lowercase word tokens of text."""
    if not text:
        return []
    return _tokenizer.tokenize(text.lower())


def stem(token: str) -> str:
    if not token:
        return ""
    return _stemmer.stem(token)


def word_set(text: str) -> set[str]:
    """Whitespace-delimited, case-folded word set."""
    return {word for word in text.lower().split() if word}


def clean_message_content(content: str, bot_id: Optional[int] = None, lowercase: bool = True) -> str:
    """
    Normalize inbound message content.

    Strips mentions of the bot and collapses whitespace. Lowercased for
    matching; generation gets the original casing.
    """
    if not content:
        return ""
    if bot_id is not None:
        content = re.sub(rf"<@!?{bot_id}>", "", content)
    content = WHITESPACE_RE.sub(" ", content).strip()
    return content.lower() if lowercase else content
