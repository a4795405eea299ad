from achievement_api.translations import (
    DEFAULT_LANGUAGE,
    LANGS,
    has_any_translation,
    localize,
    normalize,
    normalize_lang,
    pick,
    resolve_translation_input,
)


def test_normalize_empty_map_fills_every_language():
    assert normalize({}) == {lang: "" for lang in LANGS}


def test_normalize_drops_unknown_codes():
    result = normalize({"en": "x", "unknown": "y"})
    assert result["en"] == "x"
    assert "unknown" not in result
    assert all(result[lang] == "" for lang in LANGS if lang != "en")


def test_normalize_coerces_non_maps_and_non_strings():
    assert normalize("plain") == {lang: "" for lang in LANGS}
    assert normalize(None) == {lang: "" for lang in LANGS}
    assert normalize({"en": 42, "ru": None})["en"] == ""


def test_pick_has_no_fallback():
    assert pick({"en": "x"}, "ru") == ""
    assert pick({"en": "x"}, "en") == "x"
    assert pick(None, "en") == ""


def test_localize_mode_is_chosen_by_caller():
    value = {"en": "Hello", "ru": "Привет"}
    assert localize(value, "ru") == "Привет"
    assert localize(value, None) == normalize(value)


def test_plain_string_input_is_stored_under_default_language():
    result = resolve_translation_input("Beginner")
    assert result[DEFAULT_LANGUAGE] == "Beginner"
    assert set(result) == set(LANGS)


def test_has_any_translation_ignores_blank_values():
    assert not has_any_translation(normalize({"en": "   "}))
    assert has_any_translation(normalize({"gr": "Αρχάριος"}))


def test_normalize_lang_strips_region():
    assert normalize_lang("ru-RU") == "ru"
    assert normalize_lang("EN_us") == "en"
    assert normalize_lang("") is None
    assert normalize_lang(None) is None
