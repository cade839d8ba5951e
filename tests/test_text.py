from responders.text import clean_message_content, stem, tokenize, word_set


def test_tokenize_lowercases_and_drops_punctuation():
    assert tokenize("How do I Reset my password?") == ["how", "do", "i", "reset", "my", "password"]


def test_tokenize_empty():
    assert tokenize("") == []


def test_stem_reduces_to_root():
    assert stem("running") == "run"
    assert stem("passwords") == "password"
    assert stem("") == ""


def test_word_set_splits_on_whitespace():
    assert word_set("Reset  my\nPassword") == {"reset", "my", "password"}


def test_clean_message_content_strips_bot_mentions():
    assert clean_message_content("<@42>   Hello\n  THERE <@!42>", bot_id=42) == "hello there"


def test_clean_message_content_keeps_other_mentions():
    assert clean_message_content("<@7> hi", bot_id=42) == "<@7> hi"


def test_clean_message_content_can_keep_case():
    assert clean_message_content("<@42> Install  Plugin", bot_id=42, lowercase=False) == "Install Plugin"
