import asyncio

from services.documents import DocumentStore, query_words, relevance, select_relevant


def test_query_words_keep_long_words_only():
    assert query_words("How do I INSTALL the plugin") == {"install", "plugin"}


def test_relevance_matches_substrings():
    words = {"install", "plugin"}
    assert relevance(words, "Plugin installation guide") == 1.0
    assert relevance(words, "plugin overview") == 0.5
    assert relevance(set(), "anything") == 0.0


def test_select_relevant_applies_cutoff_and_order():
    docs = ["cooking recipes", "plugin installation guide", "plugin faq", "install notes"]
    assert select_relevant("install the plugin", docs) == [
        "plugin installation guide",
        "plugin faq",
        "install notes",
    ]


def test_select_relevant_returns_at_most_three():
    docs = [f"plugin doc {i}" for i in range(10)]
    assert select_relevant("plugin help", docs) == docs[:3]


def test_select_relevant_without_query_words_is_empty():
    assert select_relevant("how do i", ["how do i do it"]) == []
    assert select_relevant("", ["anything"]) == []


def test_load_reads_sources_recursively(tmp_path):
    docs = tmp_path / "resources" / "docs"
    (docs / "nested").mkdir(parents=True)
    (docs / "setup.md").write_text("Plugin installation guide", encoding="utf-8")
    (docs / "nested" / "faq.txt").write_text("Frequently asked questions", encoding="utf-8")

    store = DocumentStore(base_dir=tmp_path)
    loaded = asyncio.run(store.load(["resources/docs"]))

    assert sorted(loaded.values()) == ["Frequently asked questions", "Plugin installation guide"]
    assert str(docs / "setup.md") in loaded
    assert store.failed_sources == []


def test_load_skips_missing_sources(tmp_path):
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "good.md").write_text("plugin notes", encoding="utf-8")

    store = DocumentStore(base_dir=tmp_path)
    loaded = asyncio.run(store.load(["missing", "docs"]))

    assert list(loaded.values()) == ["plugin notes"]
    assert store.failed_sources == [str(tmp_path / "missing")]
    assert store.select_relevant("plugin") == ["plugin notes"]


def test_load_decodes_invalid_utf8_with_replacement(tmp_path):
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "legacy.txt").write_bytes(b"plugin \xff\xfe notes")

    store = DocumentStore(base_dir=tmp_path)
    loaded = asyncio.run(store.load(["docs"]))

    assert list(loaded.values()) == ["plugin \ufffd\ufffd notes"]
    assert store.failed_sources == []
    assert store.select_relevant("plugin notes") == ["plugin \ufffd\ufffd notes"]
