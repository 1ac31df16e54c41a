from domain.models import TextAlignment
from services.drawing import PillowSurface, is_valid_color, parse_color
from services.fonts import FontSpec, load_font, measure_text


def test_parse_color_handles_hex_and_css_rgba():
    assert parse_color("#4CAF50", "#000000") == (76, 175, 80, 255)
    assert parse_color("rgba(0, 0, 0, 0.3)", "#FFFFFF") == (0, 0, 0, 77)
    assert parse_color("white", "#000000") == (255, 255, 255, 255)


def test_parse_color_falls_back_to_default():
    assert parse_color("nonsense", "#FFFFFF") == (255, 255, 255, 255)
    assert not is_valid_color("nonsense")
    assert is_valid_color("rgba(10, 20, 30, 1)")


def test_font_spec_css_shorthand():
    assert FontSpec(48, bold=True).css == "bold 48px Inter, Arial, sans-serif"
    assert FontSpec(43).css == "43px Inter, Arial, sans-serif"


def test_measure_text_grows_with_text_and_size():
    small = FontSpec(20)
    assert measure_text("", small) == 0
    assert measure_text("wide words", small) > measure_text("wide", small)
    assert measure_text("wide", FontSpec(80)) > measure_text("wide", small)
    assert load_font(20) is load_font(20)


def test_fill_text_draws_near_anchor():
    surface = PillowSurface()
    surface.fill_rect(0, 0, 1080, 1080, "#000000")
    surface.fill_text("HELLO", 540, 540, FontSpec(60), "#FFFFFF", TextAlignment.CENTER)

    bbox = surface.to_image().point(lambda v: 255 if v > 128 else 0).getbbox()
    assert bbox is not None
    left, top, right, bottom = bbox
    # Centered horizontally on x; glyphs sit above the alphabetic baseline.
    assert left < 540 < right
    assert bottom <= 545
    assert top < 540
