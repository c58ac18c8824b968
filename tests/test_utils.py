from briefbot.utils import (
    count_words,
    estimate_read_time,
    split_and_strip_csv,
    strip_telemetry_lines,
    truncate_chars,
    truncate_to_complete_sentence,
    truncate_to_word_limit,
    unique_stripped,
)


def test_count_words_handles_whitespace_runs_and_empty_text():
    assert count_words("  one\ttwo \n three  ") == 3
    assert count_words("") == 0


def test_estimate_read_time_thresholds():
    assert estimate_read_time(0) == "<1m"
    assert estimate_read_time(199) == "<1m"
    assert estimate_read_time(200) == "1m"
    assert estimate_read_time(650) == "3m"


def test_truncate_to_word_limit_cuts_and_appends_ellipsis():
    text = "alpha beta   gamma delta epsilon"
    assert truncate_to_word_limit(text, 3) == "alpha beta gamma..."


def test_truncate_to_word_limit_returns_text_verbatim_when_it_fits():
    text = "alpha  beta gamma"
    assert truncate_to_word_limit(text, 3) is text
    assert truncate_to_word_limit(text, 0) is text
    assert truncate_to_word_limit(text, -1) is text


def test_truncate_to_complete_sentence_keeps_only_first_sentence():
    text = "First sentence here. Second sentence. Third one follows later on."
    assert truncate_to_complete_sentence(text, 6) == "First sentence here."


def test_truncate_to_complete_sentence_falls_back_without_boundary():
    text = "no boundary in this rather long run of words"
    assert truncate_to_complete_sentence(text, 4) == "no boundary in this..."


def test_truncate_to_complete_sentence_keeps_first_sentence_even_within_limit():
    assert truncate_to_complete_sentence("First sentence here. Second sentence. ", 5) == "First sentence here."
    assert truncate_to_complete_sentence("First sentence here. Second sentence.", 10) == "First sentence here."


def test_truncate_to_complete_sentence_leaves_single_short_sentence_alone():
    assert truncate_to_complete_sentence("Is it ready?", 10) == "Is it ready?"
    assert truncate_to_complete_sentence("no boundary here", 10) == "no boundary here"


def test_truncate_to_complete_sentence_ignores_decimal_points():
    assert truncate_to_complete_sentence("Python 3.13 ships a new REPL. Try it.", 10) == "Python 3.13 ships a new REPL."


def test_truncate_chars_hard_cuts_with_ellipsis():
    assert truncate_chars("x" * 120, 100) == "x" * 97 + "..."
    assert truncate_chars("short", 100) == "short"


def test_split_and_strip_csv_removes_empty_items():
    csv = "alpha, beta , , gamma"
    assert split_and_strip_csv(csv) == ["alpha", "beta", "gamma"]


def test_strip_telemetry_lines_drops_model_noise():
    raw = (
        "model=qwen created_at=2025-09-26T18:00:00Z latency=123ms\n"
        "assistant:thinking about something\n"
        "Try this prompt:\n"
        "\n\n"
        "Useful line\n"
    )
    cleaned = strip_telemetry_lines(raw)
    assert "model=" not in cleaned
    assert "assistant:" not in cleaned
    assert cleaned == "Try this prompt:\n\nUseful line"


def test_unique_stripped_dedupes_and_caps():
    items = [" a ", "b", "a", "", "c", "d"]
    assert unique_stripped(items, 3) == ["a", "b", "c"]
    assert unique_stripped(items, 10) == ["a", "b", "c", "d"]
