import pytest

from damon import styles


def test_background_color_is_fixed():
    assert styles.get_background_color() == (40, 44, 48)


@pytest.mark.parametrize(
    ("tag", "expected_tag", "hex_value"),
    [
        (styles.STANDARD_COLOR_TAG, "[#00b57c]", styles.STANDARD_COLOR_HEX),
        (styles.HIGHLIGHT_SECONDARY_TAG, "[#baff26]", styles.HIGHLIGHT_SECONDARY_HEX),
        (styles.COLOR_LIGHT_GREY_TAG, "[#cccccc]", styles.COLOR_LIGHT_GREY_HEX),
    ],
)
def test_tags_wrap_hex_values(tag, expected_tag, hex_value):
    assert tag == expected_tag
    assert tag.startswith("[") and tag.endswith("]")
    assert styles.hex_to_rgb(tag[1:-1]) == styles.hex_to_rgb(hex_value)


def test_white_is_full_intensity():
    assert styles.hex_to_rgb("#ffffff") == (255, 255, 255)


@pytest.mark.parametrize(
    "value",
    [
        styles.HIGHLIGHT_PRIMARY_HEX,
        styles.HIGHLIGHT_SECONDARY_HEX,
        styles.STANDARD_COLOR_HEX,
        styles.COLOR_ACTIVE_HEX,
        styles.COLOR_MODAL_INFO_HEX,
        styles.COLOR_ATTENTION_HEX,
    ],
)
def test_hex_round_trip(value):
    rgb = styles.hex_to_rgb(value)
    assert "#%02x%02x%02x" % rgb == value
    assert all(0 <= part <= 255 for part in rgb)


def test_derived_colors_match_hex():
    assert styles.COLOR_STANDARD == styles.hex_to_rgb(styles.STANDARD_COLOR_HEX)


@pytest.mark.parametrize("value", ["nope", "26ffe6", "#12345", "#gggggg", ""])
def test_invalid_hex_rejected(value):
    with pytest.raises(ValueError):
        styles.hex_to_rgb(value)