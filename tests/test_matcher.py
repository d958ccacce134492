import copy

from services.matcher import (
    DEFAULT_CONFIG,
    MatcherConfig,
    match_events,
    rank_events,
    score_event,
    tokenize,
)

FESTIVAL = {
    "id": "1",
    "title": "Summer Music Festival 2024",
    "description": "The biggest outdoor music experience of the year featuring top international artists.",
    "date": "2024-07-15",
    "location": "Central Park, New York",
    "category": "Music",
    "price": 120,
}


def _event(i, **kw):
    base = {
        "id": str(i),
        "title": f"Event {i}",
        "description": "",
        "date": "2024-01-01",
        "location": "Somewhere",
        "category": "Misc",
        "price": 10,
    }
    base.update(kw)
    return base


def test_tokenize_drops_short_words():
    assert tokenize("Events IN Chennai at 7") == ["events", "chennai"]
    assert tokenize("") == []
    assert tokenize(None) == []


def test_music_festival_scenario():
    s = score_event("music festival", FESTIVAL)
    # title 5+5, category 4, description 3
    assert s == 17
    assert match_events("music festival", [FESTIVAL]) == [FESTIVAL]


def test_each_field_counts_once_per_token():
    e = _event(1, title="jazz jazz jazz")
    assert score_event("jazz", e) == 5


def test_city_bonus_ranks_location_match_first():
    catalog = [
        _event(1, title="Wedding Expo", category="Wedding"),
        _event(2, title="Art Walk", location="Chennai"),
        _event(3, title="Food Fair"),
    ]
    result = match_events("chennai", catalog)
    assert result[0]["id"] == "2"
    # location weight 2 + city bonus 4
    assert score_event("chennai", catalog[1]) == 6
    assert [e["id"] for e in result] == ["2"]


def test_free_bonus_breaks_tie():
    catalog = [
        _event(1, title="Community events day", price=20),
        _event(2, title="Open events day", price=0),
    ]
    result = match_events("free events", catalog)
    assert [e["id"] for e in result] == ["2", "1"]


def test_budget_bonus_uses_threshold():
    cheap = _event(1, title="Pottery class", price=999)
    pricey = _event(2, title="Pottery class", price=1000)
    assert score_event("cheap pottery", cheap) == score_event("cheap pottery", pricey) + 2


def test_missing_price_gets_no_price_bonus():
    e = _event(1, title="wifi day")
    e.pop("price")
    assert score_event("free", e) == 0


def test_category_synonym_bonus():
    gala = _event(1, title="Night out", category="Charity Gala")
    # "dinner" is a gala synonym; no plain token hits
    assert score_event("dinner", gala) == 3


def test_short_query_without_bonus_is_empty():
    assert match_events("ai", [_event(1, title="AI summit")]) == []


def test_empty_inputs():
    assert match_events("music", []) == []
    assert match_events("", [FESTIVAL]) == []
    assert match_events(None, [FESTIVAL]) == []
    assert rank_events("music", None) == []


def test_shortlist_is_bounded_and_positive():
    catalog = [_event(i, title=f"rock night {i}") for i in range(12)]
    catalog.append(_event(99, title="nothing relevant"))
    ranked = rank_events("rock", catalog)
    assert len(ranked) == DEFAULT_CONFIG.shortlist_size
    assert all(s.score > 0 for s in ranked)
    # ties keep catalog order
    assert [s.event["id"] for s in ranked] == ["0", "1", "2", "3", "4"]


def test_deterministic_and_catalog_untouched():
    catalog = [_event(i, title="live show", price=i * 100) for i in range(8)]
    before = copy.deepcopy(catalog)
    first = match_events("live show cheap", catalog)
    second = match_events("live show cheap", catalog)
    assert first == second
    assert catalog == before


def test_malformed_events_are_tolerated():
    catalog = [{"id": "x"}, {"id": "y", "title": None, "price": "abc"}, _event(1, title="jazz")]
    assert [e["id"] for e in match_events("jazz", catalog)] == ["1"]


def test_attribute_objects_are_supported():
    class Obj:
        title = "Jazz Night"
        category = "Music"
        description = ""
        location = "Madurai"
        price = 0

    assert score_event("jazz madurai free", Obj()) == 5 + 2 + 4 + 2


def test_location_hint_folds_into_query():
    catalog = [_event(1, title="Jazz"), _event(2, title="Jazz", location="Salem")]
    result = match_events("jazz", catalog, location="Salem")
    assert [e["id"] for e in result] == ["2", "1"]


def test_date_hint_filters_candidates():
    catalog = [_event(1, title="Jazz", date="2024-05-01"), _event(2, title="Jazz", date="2024-06-01")]
    assert [e["id"] for e in match_events("jazz", catalog, date="2024-06-01")] == ["2"]


def test_custom_config():
    cfg = MatcherConfig(shortlist_size=2, cities=("springfield",))
    catalog = [_event(i, title="fair", location="Springfield") for i in range(4)]
    ranked = rank_events("fair springfield", catalog, cfg)
    assert len(ranked) == 2
    # title 5 + location 2 + city 4
    assert ranked[0].score == 11
