from responders.steps import parse_steps


def test_step_markers():
    assert parse_steps("[STEP_1]A[STEP_2]B") == ["A", "B"]


def test_plain_text_is_single_step():
    assert parse_steps("plain text") == ["plain text"]


def test_sentinel_splits_on_blank_lines():
    assert parse_steps("[HAS_NEXT_STEPS]\nA\n\nB") == ["A", "B"]


def test_sentinel_with_single_block_is_one_step():
    assert parse_steps("[HAS_NEXT_STEPS] Just do it.") == ["Just do it."]


def test_markers_are_trimmed_and_preamble_dropped():
    text = "[HAS_NEXT_STEPS] Here is how:\n[STEP_1]  Open settings.\n\n[STEP_2]\nClick save.\n"
    assert parse_steps(text) == ["Open settings.", "Click save."]


def test_sparse_and_unordered_markers_follow_step_number():
    assert parse_steps("[STEP_3] C [STEP_1] A [STEP_7] G") == ["A", "C", "G"]


def test_repeated_marker_keeps_later_text():
    assert parse_steps("[STEP_1] old [STEP_1] new") == ["new"]


def test_multiline_step_bodies():
    text = "[STEP_1] Line one\nline two\n[STEP_2] Done"
    assert parse_steps(text) == ["Line one\nline two", "Done"]


def test_blank_lines_with_spaces_split_sentinel_text():
    assert parse_steps("[HAS_NEXT_STEPS]A\n   \nB\n\n\nC") == ["A", "B", "C"]


def test_output_is_never_empty():
    assert parse_steps("") == [""]
    assert parse_steps("   ") == [""]
