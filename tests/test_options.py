from captionkit.services.composer import Length, Placement, Voice
from captionkit.services.options import (
    build_options,
    parse_bool,
    parse_emoji_count,
    parse_list_field,
)


def test_list_field_shapes():
    assert parse_list_field('["SunnyDay", "Nature"]') == ["SunnyDay", "Nature"]
    assert parse_list_field("alice, @bob ,, ") == ["alice", "@bob"]
    assert parse_list_field(None) == []
    assert parse_list_field("") == []
    assert parse_list_field(["a", 1]) == ["a", "1"]


def test_keywords_only_accept_json_arrays():
    assert parse_list_field('["river"]', comma_fallback=False) == ["river"]
    assert parse_list_field("river, sunny", comma_fallback=False) == []
    assert parse_list_field('"river"', comma_fallback=False) == []


def test_parse_bool():
    assert parse_bool("true", False) is True
    assert parse_bool(" TRUE ", False) is True
    assert parse_bool("false", True) is False
    assert parse_bool("yes", True) is False
    assert parse_bool(None, True) is True


def test_emoji_count_clamped():
    assert parse_emoji_count("5") == 5
    assert parse_emoji_count("0") == 1
    assert parse_emoji_count("20") == 8
    assert parse_emoji_count("abc") == 2
    assert parse_emoji_count("nan") == 2


def test_build_options_defaults():
    opts, count = build_options({})
    assert count == 2
    assert opts.tone == "casual"
    assert opts.include_hashtags is True
    assert opts.include_mentions is False
    assert opts.include_emojis is False
    assert opts.include_location is True
    assert opts.location is None
    assert opts.voice is Voice.NEUTRAL
    assert opts.length is Length.MEDIUM
    assert opts.placements() == {
        "hashtagsPlacement": "end",
        "mentionsPlacement": "end",
        "emojiPlacement": "end",
    }


def test_build_options_from_form():
    opts, count = build_options({
        "tone": "witty",
        "keywords": '["river"]',
        "hashtags": "SunnyDay,Nature",
        "includeMentions": "true",
        "includeEmojis": "true",
        "location": "  Paris ",
        "handles": '["alice", "@bob"]',
        "voice": "WE",
        "length": "Short",
        "emojiCount": "12",
        "emojiPlacement": "beginning",
        "mentionsPlacement": "sideways",
        "hashtagsPlacement": "Middle",
    })
    assert count == 8
    assert opts.keywords == ("river",)
    assert opts.hashtags == ("SunnyDay", "Nature")
    assert opts.handles == ("alice", "@bob")
    assert opts.location == "Paris"
    assert opts.voice is Voice.WE
    assert opts.length is Length.SHORT
    assert opts.emoji_placement is Placement.BEGINNING
    assert opts.mentions_placement is Placement.END
    assert opts.hashtags_placement is Placement.MIDDLE
