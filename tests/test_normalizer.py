import math

import pytest

from scrobble_analytics.normalizer import normalize_scrobble


def test_trims_fields_and_drops_extras():
    record = normalize_scrobble({
        "artist": "  Nirvana ",
        "track": "\tLithium\n",
        "album": " Nevermind ",
        "listenedAt": 1700000000,
        "mbid": "ignored",
    })
    assert record is not None
    assert record.model_dump(by_alias=True) == {
        "artist": "Nirvana",
        "track": "Lithium",
        "album": "Nevermind",
        "listenedAt": 1700000000,
    }


def test_missing_album_becomes_empty_string():
    record = normalize_scrobble({"artist": "A", "track": "T", "listenedAt": 10})
    assert record.album == ""


def test_non_string_fields_are_treated_as_empty():
    assert normalize_scrobble({"artist": 42, "track": "T", "listenedAt": 10}) is None
    record = normalize_scrobble({"artist": "A", "track": "T", "album": ["x"], "listenedAt": 10})
    assert record.album == ""


@pytest.mark.parametrize("raw", [
    {"artist": "", "track": "T", "listenedAt": 10},
    {"artist": "   ", "track": "T", "listenedAt": 10},
    {"artist": "A", "track": " ", "listenedAt": 10},
    {"artist": "A", "listenedAt": 10},
    {"artist": "A", "track": "T", "listenedAt": 0},
    {"artist": "A", "track": "T", "listenedAt": -5},
    {"artist": "A", "track": "T", "listenedAt": 0.9},
    {"artist": "A", "track": "T", "listenedAt": "abc"},
    {"artist": "A", "track": "T", "listenedAt": ""},
    {"artist": "A", "track": "T", "listenedAt": math.inf},
    {"artist": "A", "track": "T", "listenedAt": math.nan},
    {"artist": "A", "track": "T", "listenedAt": "Infinity"},
    {"artist": "A", "track": "T", "listenedAt": {"uts": 10}},
    {"artist": "A", "track": "T"},
])
def test_rejects_invalid_entries(raw):
    assert normalize_scrobble(raw) is None


@pytest.mark.parametrize("raw", [None, 17, "a string", ["A", "T", 10]])
def test_rejects_non_objects(raw):
    assert normalize_scrobble(raw) is None


@pytest.mark.parametrize("value,expected", [
    (1700000000, 1700000000),
    (1700000000.9, 1700000000),
    ("1700000000", 1700000000),
    (" 1700000000.7 ", 1700000000),
    ("1.7e9", 1700000000),
])
def test_coerces_and_truncates_timestamp(value, expected):
    record = normalize_scrobble({"artist": "A", "track": "T", "listenedAt": value})
    assert record.listened_at == expected


def test_falls_back_to_timestamp_field():
    record = normalize_scrobble({"artist": "A", "track": "T", "timestamp": 1700000000})
    assert record.listened_at == 1700000000


def test_listened_at_takes_precedence_over_timestamp():
    record = normalize_scrobble({"artist": "A", "track": "T", "listenedAt": 5, "timestamp": 99})
    assert record.listened_at == 5


def test_null_listened_at_falls_back_to_timestamp():
    record = normalize_scrobble({"artist": "A", "track": "T", "listenedAt": None, "timestamp": 99})
    assert record.listened_at == 99


def test_is_deterministic():
    raw = {"artist": " A ", "track": "T", "listenedAt": "12.5"}
    assert normalize_scrobble(raw) == normalize_scrobble(raw)


@pytest.mark.parametrize("value", ["1_700_000_000", "１７００", "12abc", "0x", "--5", "Infinity"])
def test_rejects_strings_number_would_not_parse(value):
    assert normalize_scrobble({"artist": "A", "track": "T", "listenedAt": value}) is None


@pytest.mark.parametrize("value,expected", [("0x10", 16), ("0o17", 15), ("0b101", 5), (".5e1", 5), ("+42", 42)])
def test_accepts_strings_number_would_parse(value, expected):
    record = normalize_scrobble({"artist": "A", "track": "T", "listenedAt": value})
    assert record.listened_at == expected
