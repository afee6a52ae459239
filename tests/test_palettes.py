from iconatlas.palettes import COLOR_THEMES, DEFAULT_PALETTE, get_palette, is_valid_color, resolve_color


def test_unknown_palette_falls_back():
    assert get_palette("no-such-theme") == COLOR_THEMES[DEFAULT_PALETTE]
    assert get_palette(None) == COLOR_THEMES[DEFAULT_PALETTE]


def test_shade_out_of_range_resets():
    assert resolve_color("red", 2) == "#dc2626"
    assert resolve_color("red", 99) == "#ef4444"
    assert resolve_color("red", -1) == "#ef4444"


def test_color_validation():
    for ok in ["#fff", "#3b82f6", "rgb(0, 0, 0)", "hsl(210 40% 50%)", "currentColor", "tomato"]:
        assert is_valid_color(ok), ok
    for bad in ["", None, "#12", "red; background: url(x)", "<script>"]:
        assert not is_valid_color(bad), bad
