import pytest

from corsware.cors.vary import append_vary, vary


def test_append_to_empty():
    assert append_vary(None, "Origin") == "Origin"
    assert append_vary("", "Origin") == "Origin"


def test_append_keeps_existing_fields():
    assert append_vary("Accept-Encoding", "Origin") == "Accept-Encoding, Origin"


def test_duplicates_are_ignored_case_insensitively():
    assert append_vary("origin, Accept", "Origin") == "origin, Accept"


def test_star_absorbs_everything():
    assert append_vary("*", "Origin") == "*"
    assert append_vary("Origin", "*") == "*"


def test_invalid_field_name():
    with pytest.raises(ValueError):
        append_vary(None, "Bad Header")


def test_vary_updates_response(response):
    vary(response, "Origin")
    vary(response, "Access-Control-Request-Headers")
    vary(response, "Origin")
    assert response.get_header("Vary") == "Origin, Access-Control-Request-Headers"
