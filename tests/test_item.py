import json

import pytest

from hn_sync.errors import DecodeError
from hn_sync.ingest.item import COLUMNS, Item, parse_sql_value


MINIMAL = {"id": 8863, "type": "story", "time": 1175714200}


def test_missing_optional_fields_decode_to_defaults() -> None:
    item = Item.from_json(json.dumps(MINIMAL))

    assert item.id == 8863
    assert item.type == "story"
    assert item.time == 1175714200
    assert item.deleted is False
    assert item.dead is False
    assert item.children == ()
    assert item.title == ""
    assert item.score == 0
    assert item.text == ""
    assert item.url == ""
    assert item.parent == 0
    assert item.author == ""


def test_null_optional_fields_decode_to_defaults() -> None:
    payload = dict(MINIMAL, by=None, kids=None, score=None, dead=None)
    item = Item.from_json(json.dumps(payload))

    assert item.author == ""
    assert item.children == ()
    assert item.score == 0
    assert item.dead is False


def test_feed_field_names_are_mapped() -> None:
    payload = dict(
        MINIMAL,
        by="dhouston",
        kids=[8952, 9224],
        title="My YC app: Dropbox",
        score=111,
        url="http://www.getdropbox.com/u/2/screencast.html",
        descendants=71,
    )
    item = Item.from_json(json.dumps(payload))

    assert item.author == "dhouston"
    assert item.children == (8952, 9224)
    assert item.kids_text == "[8952, 9224]"
    assert item.score == 111


@pytest.mark.parametrize("missing", ["id", "type", "time"])
def test_missing_required_field_is_a_decode_error(missing: str) -> None:
    payload = dict(MINIMAL)
    del payload[missing]
    with pytest.raises(DecodeError, match=missing):
        Item.from_json(json.dumps(payload))


@pytest.mark.parametrize("body", ["", "null", "  null \n", "{}"])
def test_short_bodies_are_invalid(body: str) -> None:
    with pytest.raises(DecodeError, match="too short"):
        Item.from_json(body)


def test_malformed_json_is_a_decode_error() -> None:
    with pytest.raises(DecodeError):
        Item.from_json('{"id": 1, "type": "story", "time": ')


def test_wrong_field_type_is_a_decode_error() -> None:
    with pytest.raises(DecodeError, match="kids"):
        Item.from_json(json.dumps(dict(MINIMAL, kids="1,2")))


def test_sql_value_escapes_quotes_and_encodes_booleans() -> None:
    item = Item(
        id=42,
        type="comment",
        time=1700000000,
        deleted=True,
        author="o'brien",
        children=(43, 44),
        title="It's here",
        text="say 'hi', then leave",
        url="http://example.com/?q='x'",
        parent=41,
    )

    encoded = item.to_sql_value()

    assert encoded.startswith("(42, 1, 'comment', 'o''brien', 1700000000, 0, '[43, 44]', ")
    assert "'It''s here'" in encoded
    assert "'say ''hi'', then leave'" in encoded
    assert "'http://example.com/?q=''x'''" in encoded
    assert encoded.endswith(", 0, 'http://example.com/?q=''x''', 41)")


def test_sql_value_parses_back_to_the_same_columns() -> None:
    item = Item(
        id=9001,
        type="story",
        time=1234567890,
        author="it's, me",
        title="a, b, 'c'",
        text="",
        url="''",
        score=-3,
        parent=77,
    )

    values = dict(zip(COLUMNS, parse_sql_value(item.to_sql_value())))

    assert len(values) == len(COLUMNS)
    assert values["id"] == 9001
    assert values["time"] == 1234567890
    assert values["parent"] == 77
    assert values["who"] == "it's, me"
    assert values["title"] == "a, b, 'c'"
    assert values["content"] == ""
    assert values["url"] == "''"
    assert values["score"] == -3
    assert values["kids"] == "[]"


def test_parse_sql_value_rejects_truncated_input() -> None:
    with pytest.raises(DecodeError):
        parse_sql_value("(1, 0, 'story")


def test_sql_value_escapes_line_breaks() -> None:
    item = Item(id=3, type="comment", time=1, text="first\nsecond\rthird \\n literal")

    encoded = item.to_sql_value()

    assert "\n" not in encoded and "\r" not in encoded
    assert "'first\\nsecond\\rthird \\\\n literal'" in encoded
    values = dict(zip(COLUMNS, parse_sql_value(encoded)))
    assert values["content"] == "first\nsecond\rthird \\n literal"


def test_parse_sql_value_rejects_unknown_escape() -> None:
    with pytest.raises(DecodeError, match="escape"):
        parse_sql_value("(1, 0, 'a\\tb', '', 1, 0, '[]', '', '', 0, '', 0)")
