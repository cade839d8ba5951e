"""
Similarity scoring between an inbound message and a trigger phrase.

The fused score combines three signals:
- Jaro-Winkler similarity of the full normalized strings (weight 0.5)
- stemmed token overlap (weight 0.3)
- corpus-weighted term similarity (weight 0.2)
"""
from __future__ import annotations

import math
from collections import Counter
from typing import Optional

from nltk.metrics.distance import jaro_winkler_similarity

from core.constants import CorpusMode

from .text import stem, tokenize, word_set

EXACT_WEIGHT = 0.5
STEMMED_WEIGHT = 0.3
CORPUS_WEIGHT = 0.2

STEMMED_BONUS = 0.1
CORPUS_SCALE = 10.0
DIRECT_MATCH_RATIO = 0.8


class TermCorpus:
    """
    Term-frequency corpus with smoothed inverse document frequency.

    idf(t) = 1 + ln(N / (1 + df(t))), tf is the raw count in a document.
    """

    def __init__(self) -> None:
        self.documents: list[Counter[str]] = []

    def __len__(self) -> int:
        return len(self.documents)

    def add_document(self, tokens: list[str]) -> int:
        """Add a document and return its index."""
        self.documents.append(Counter(tokens))
        return len(self.documents) - 1

    def idf(self, term: str) -> float:
        if not self.documents:
            return 0.0
        docs_with_term = sum(1 for document in self.documents if term in document)
        return 1.0 + math.log(len(self.documents) / (1 + docs_with_term))

    def tfidf(self, terms: list[str], index: int) -> float:
        document = self.documents[index]
        return sum(document[term] * self.idf(term) for term in terms if term in document)


def exact_similarity(left: str, right: str) -> float:
    if left == right:
        return 1.0 if left else 0.0
    if not left or not right:
        return 0.0
    return jaro_winkler_similarity(left, right)


def stemmed_similarity(tokens1: list[str], tokens2: list[str]) -> float:
    total = len(tokens1) + len(tokens2)
    if total == 0:
        return 0.0
    stems2 = {stem(token) for token in tokens2}
    common = sum(1 for token in tokens1 if stem(token) in stems2)
    if common == 0:
        return 0.0
    return min(1.0, (2.0 * common) / total + STEMMED_BONUS)


def direct_overlap_ratio(message: str, phrase: str) -> float:
    phrase_words = word_set(phrase)
    if not phrase_words:
        return 0.0
    return len(phrase_words & word_set(message)) / len(phrase_words)


class SimilarityScorer:
    """
    Scores message/phrase pairs.

    In per-call mode every score() builds a fresh two-document corpus, so the
    result depends only on its arguments. In cumulative mode the corpus keeps
    every pair ever scored and later scores drift with earlier traffic.
    """

    def __init__(self, corpus_mode: str = CorpusMode.PER_CALL) -> None:
        if corpus_mode not in (CorpusMode.PER_CALL, CorpusMode.CUMULATIVE):
            raise ValueError(f"Unknown corpus mode: {corpus_mode}")
        self.corpus_mode = corpus_mode
        self._corpus: Optional[TermCorpus] = (
            TermCorpus() if corpus_mode == CorpusMode.CUMULATIVE else None
        )

    def corpus_similarity(self, message_tokens: list[str], phrase_tokens: list[str]) -> float:
        corpus = self._corpus if self._corpus is not None else TermCorpus()
        corpus.add_document(message_tokens)
        phrase_index = corpus.add_document(phrase_tokens)
        weight = corpus.tfidf(message_tokens, phrase_index)
        return min(1.0, max(0.0, weight / CORPUS_SCALE))

    def score(self, message: str, phrase: str) -> float:
        """Fused similarity in [0, 1]."""
        message_norm = message.lower()
        phrase_norm = phrase.lower()
        message_tokens = tokenize(message_norm)
        phrase_tokens = tokenize(phrase_norm)

        total = (
            exact_similarity(message_norm, phrase_norm) * EXACT_WEIGHT
            + stemmed_similarity(message_tokens, phrase_tokens) * STEMMED_WEIGHT
            + self.corpus_similarity(message_tokens, phrase_tokens) * CORPUS_WEIGHT
        )
        return min(1.0, max(0.0, total))

    @staticmethod
    def is_direct_match(message: str, phrase: str) -> bool:
        return direct_overlap_ratio(message, phrase) >= DIRECT_MATCH_RATIO
