import pytest

from wa2dc.errors import InvalidStorageKey
from wa2dc.memory.keystore import naming


@pytest.mark.parametrize(
    "category,key_id,filename",
    [
        ("tctoken", "test", "tctoken-test.json"),
        ("lid-mapping", "pn", "lid-mapping-pn.json"),
        ("session", "123:4@lid", "session-123%3A4%40lid.json"),
        ("sender-key", "g-1", "sender-key-g%2D1.json"),
    ],
)
def test_record_filename(category, key_id, filename):
    assert naming.record_filename(category, key_id) == filename
    assert naming.parse_filename(filename) == (category, key_id)


def test_encoding_is_injective_across_category_boundaries():
    pairs = [
        ("device", "index-primary"),
        ("device-index", "primary"),
        ("a", "b-c"),
        ("a-b", "c"),
        ("a/b", "c"),
        ("a", "b/c"),
        ("x", "%2D"),
        ("x", "-"),
    ]
    names = {naming.record_filename(c, i) for c, i in pairs}
    assert len(names) == len(pairs)
    for category, key_id in pairs:
        assert naming.parse_filename(naming.record_filename(category, key_id)) == (category, key_id)


def test_non_record_names_do_not_parse():
    assert naming.parse_filename("creds.json") is None
    assert naming.parse_filename("tctoken-test.json.123.tmp") is None
    assert naming.parse_filename("-orphan.json") is None


def test_empty_category_is_invalid():
    with pytest.raises(InvalidStorageKey):
        naming.record_filename("", "x")
