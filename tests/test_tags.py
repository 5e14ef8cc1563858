from infra_stats.tags import (
    BACKWARD,
    FORWARD,
    has_value_other_than_no,
    is_oneway,
    parse_count,
    resolve_tag,
    traversable_directions,
)


def test_parse_count_accepts_integers() -> None:
    assert parse_count("3") == 3
    assert parse_count(" 2 ") == 2
    assert parse_count("2.0") == 2
    assert parse_count("0") == 0


def test_parse_count_rejects_malformed_values() -> None:
    assert parse_count(None) is None
    assert parse_count("") is None
    assert parse_count("2;3") is None
    assert parse_count("many") is None
    assert parse_count("-1") is None
    assert parse_count("nan") is None
    assert parse_count("inf") is None


def test_resolve_prefers_per_lane_directional_list() -> None:
    tags = {
        "turn:lanes:forward": "left|through",
        "turn:lanes": "through|through",
        "turn:forward": "right",
        "turn": "left",
    }
    assert resolve_tag("turn", tags, FORWARD) == "left|through"
    assert resolve_tag("turn", tags, BACKWARD) == "through|through"


def test_resolve_falls_back_to_directional_then_plain_value() -> None:
    tags = {"turn:forward": "right", "turn": "left"}
    assert resolve_tag("turn", tags, FORWARD) == "right"
    assert resolve_tag("turn", tags, BACKWARD) == "left"
    assert resolve_tag("turn", {}, FORWARD) is None


def test_resolve_expands_single_value_to_lane_count() -> None:
    assert resolve_tag("turn", {"turn": "left"}, FORWARD, 3) == "left|left|left"
    assert resolve_tag("turn", {"turn:backward": "right"}, BACKWARD, 2) == "right|right"


def test_resolve_does_not_expand_lists_or_per_lane_tags() -> None:
    assert resolve_tag("turn", {"turn:forward": "left|through"}, FORWARD, 2) == "left|through"
    assert resolve_tag("turn", {"turn:lanes": "left|"}, FORWARD, 4) == "left|"


def test_resolve_treats_empty_value_as_absent() -> None:
    tags = {"turn:lanes:forward": "", "turn": "left"}
    assert resolve_tag("turn", tags, FORWARD) == "left"


def test_traversable_directions() -> None:
    assert traversable_directions({}) == (FORWARD, BACKWARD)
    assert traversable_directions({"oneway": "no"}) == (FORWARD, BACKWARD)
    assert traversable_directions({"oneway": "yes"}) == (FORWARD,)
    assert traversable_directions({"oneway": "-1"}) == (BACKWARD,)
    assert is_oneway({"oneway": "yes"}) is True
    assert is_oneway({"oneway": "-1"}) is True
    assert is_oneway({"oneway": "no"}) is False


def test_has_value_other_than_no() -> None:
    assert has_value_other_than_no({"bridge": "yes"}, "bridge") is True
    assert has_value_other_than_no({"bridge": "viaduct"}, "bridge") is True
    assert has_value_other_than_no({"bridge": "no"}, "bridge") is False
    assert has_value_other_than_no({}, "bridge") is False
