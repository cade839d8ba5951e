import pytest

from responders.chunking import SEPARATORS, split_for_transport


def _rebuilds(text, chunks):
    """True if chunks rebuild text with exactly one separator between neighbours."""
    def walk(pos, index):
        chunk = chunks[index]
        if not text.startswith(chunk, pos):
            return False
        pos += len(chunk)
        if index == len(chunks) - 1:
            return pos == len(text)
        return any(
            text.startswith(sep, pos) and walk(pos + len(sep), index + 1)
            for sep in SEPARATORS
        )
    return walk(0, 0)


def _is_atomic(chunk):
    return not any(sep in chunk for sep in SEPARATORS)


def test_short_text_is_one_chunk():
    assert split_for_transport("hello world", 2000) == ["hello world"]


def test_empty_text_has_no_chunks():
    assert split_for_transport("", 10) == []


def test_invalid_length_rejected():
    with pytest.raises(ValueError):
        split_for_transport("text", 0)


def test_prefers_paragraph_boundaries():
    text = "a" * 10 + "\n\n" + "b" * 10
    assert split_for_transport(text, 15) == ["a" * 10, "b" * 10]


def test_packs_paragraphs_together_when_they_fit():
    text = "one\n\ntwo\n\nthree"
    assert split_for_transport(text, 10) == ["one\n\ntwo", "three"]


def test_falls_back_to_lines():
    assert split_for_transport("aaaa\nbbbb\ncccc", 9) == ["aaaa\nbbbb", "cccc"]


def test_falls_back_to_words():
    assert split_for_transport("one two three four", 8) == ["one two", "three", "four"]


def test_oversized_word_is_kept_whole():
    chunks = split_for_transport("tiny enormousword end", 5)
    assert chunks == ["tiny", "enormousword", "end"]


def test_long_mixed_text_respects_limit_and_rebuilds():
    paragraphs = []
    for p in range(6):
        lines = []
        for line in range(4):
            lines.append(" ".join(f"word{p}{line}{w}" for w in range(9)))
        paragraphs.append("\n".join(lines))
    paragraphs.append("x" * 70)
    text = "\n\n".join(paragraphs)

    for limit in (1, 7, 30, 64, 200, 5000):
        chunks = split_for_transport(text, limit)
        assert chunks
        assert _rebuilds(text, chunks)
        for chunk in chunks:
            assert len(chunk) <= limit or _is_atomic(chunk)


def test_rebuilds_with_repeated_separators():
    text = "alpha  beta\n\n\ngamma delta\nepsilon"
    for limit in (3, 6, 12):
        chunks = split_for_transport(text, limit)
        assert _rebuilds(text, chunks)
