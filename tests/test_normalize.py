import re
import pytest

from cannagraph.shared.normalize import blank_to_none, clean_labels, lookup_key, slugify

def test_slugify_transliterates_german_characters():
    assert slugify("Grünhorn Apotheke") == "gruenhorn-apotheke"
    assert slugify("Straße") == "strasse"
    assert slugify("ÄÖÜ") == "aeoeue"

def test_slugify_strips_and_collapses():
    slug = slugify("  Mâcon!!")
    assert re.fullmatch(r"[a-z0-9-]*", slug)
    assert not slug.startswith("-") and not slug.endswith("-")
    assert slug == "m-con"

@pytest.mark.parametrize("name, expected", [
    ("Amnesia Haze", "amnesia-haze"),
    ("OG Kush #1", "og-kush-1"),
    ("--already-a-slug--", "already-a-slug"),
    ("", ""),
    (None, ""),
    ("!!!", ""),
])
def test_slugify_cases(name, expected):
    assert slugify(name) == expected

def test_slugify_is_idempotent_on_slugs():
    assert slugify(slugify("Frankfurt am Main")) == "frankfurt-am-main"

def test_lookup_key_is_case_insensitive():
    assert lookup_key("  Amnesia HAZE ") == "amnesia haze"
    assert lookup_key(None) == ""

def test_clean_labels_drops_blanks_and_keeps_order():
    assert clean_labels(["Myrcen", " ", None, 3, " Limonen "]) == ["Myrcen", "Limonen"]
    assert clean_labels(None) == []

def test_clean_labels_single_string_is_one_label():
    assert clean_labels("Indica") == ["Indica"]
    assert clean_labels("  ") == []
    assert clean_labels(42) == []

def test_blank_to_none():
    assert blank_to_none("  ") is None
    assert blank_to_none(None) is None
    assert blank_to_none(" x ") == "x"
