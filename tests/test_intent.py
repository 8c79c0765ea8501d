import pytest

from tools.web.intent import detect_input_type

pytestmark = pytest.mark.unit


def test_message_with_url_splits_url_and_query():
    detection = detect_input_type("summarize https://example.com/a")
    assert detection.has_url is True
    assert detection.url == "https://example.com/a"
    assert detection.query == "summarize"


def test_plain_message_has_no_url():
    detection = detect_input_type("hello there")
    assert detection.has_url is False
    assert detection.url is None
    assert detection.query == "hello there"


def test_first_url_wins_and_every_url_is_removed_from_query():
    detection = detect_input_type("compare http://a.example/x and https://b.example/y please")
    assert detection.url == "http://a.example/x"
    assert "a.example" not in detection.query
    assert "b.example" not in detection.query
    assert detection.query.startswith("compare")
    assert detection.query.endswith("please")


def test_url_only_message_leaves_empty_query():
    detection = detect_input_type("   https://example.com/page?q=1   ")
    assert detection.url == "https://example.com/page?q=1"
    assert detection.query == ""


def test_scheme_is_required():
    detection = detect_input_type("look at www.example.com")
    assert detection.has_url is False


def test_url_ends_at_whitespace():
    detection = detect_input_type("what is https://example.com/path\tabout")
    assert detection.url == "https://example.com/path"
    assert detection.query == "what is \tabout"
