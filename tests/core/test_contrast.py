"""Tests for WCAG contrast math and color parsing."""

import pytest

from vitalscope.core.contrast import (
    Color,
    ColorSample,
    ConformanceLevel,
    classify,
    contrast_ratio,
    evaluate,
    non_responsive_elements,
    parse_color,
)

WHITE = Color(255, 255, 255)
BLACK = Color(0, 0, 0)


def test_mid_gray_on_white_fails_for_normal_text() -> None:
    """rgb(153,153,153) on white is roughly 2.85:1."""
    sample = ColorSample(
        element_id="#caption",
        scheme="light",
        foreground=parse_color("rgb(153, 153, 153)"),
        background=parse_color("rgb(255, 255, 255)"),
    )

    finding = evaluate(sample)

    assert finding.ratio == pytest.approx(2.85, abs=0.01)
    assert finding.level is ConformanceLevel.FAIL
    assert not finding.passes_aa
    assert finding.to_dict()["ratio"] == 2.85


def test_extremes() -> None:
    assert contrast_ratio(BLACK, WHITE) == pytest.approx(21.0)
    assert contrast_ratio(WHITE, WHITE) == pytest.approx(1.0)


def test_ratio_is_symmetric() -> None:
    gray = Color(119, 119, 119)
    assert contrast_ratio(gray, WHITE) == pytest.approx(contrast_ratio(WHITE, gray))


def test_large_text_thresholds() -> None:
    # #777 on white is about 4.48:1
    ratio = contrast_ratio(parse_color("#777"), WHITE)

    assert classify(ratio, large_text=False) is ConformanceLevel.FAIL
    assert classify(ratio, large_text=True) is ConformanceLevel.AA
    assert classify(7.0) is ConformanceLevel.AAA
    assert classify(4.5, large_text=True) is ConformanceLevel.AAA
    assert classify(3.0, large_text=True) is ConformanceLevel.AA


@pytest.mark.parametrize(
    ("size", "weight", "large"),
    [
        (16.0, 400, False),
        (24.0, 400, True),
        (19.0, 700, True),
        (19.0, 600, False),
        (18.0, 700, False),
    ],
)
def test_large_text_detection(size, weight, large) -> None:
    sample = ColorSample("#t", "light", BLACK, WHITE, font_size_px=size, font_weight=weight)
    assert sample.large_text is large


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("rgb(10, 20, 30)", Color(10, 20, 30)),
        ("rgba(10, 20, 30, 0.5)", Color(10, 20, 30, 0.5)),
        ("rgb(10 20 30 / 50%)", Color(10, 20, 30, 0.5)),
        ("rgb(100%, 0%, 0%)", Color(255, 0, 0)),
        ("#fff", Color(255, 255, 255)),
        ("#00000080", Color(0, 0, 0, 128 / 255)),
        ("  #1A2b3C ", Color(26, 43, 60)),
        ("transparent", Color(0, 0, 0, 0.0)),
    ],
)
def test_parse_color_formats(text, expected) -> None:
    assert parse_color(text) == expected


@pytest.mark.parametrize("text", ["red", "#ggg", "rgb(1, 2)", "rgb(a, b, c)", ""])
def test_parse_color_rejects_unknown(text) -> None:
    with pytest.raises(ValueError):
        parse_color(text)


def test_translucent_background_composited_over_white() -> None:
    # Fully transparent background behaves like white
    assert contrast_ratio(BLACK, parse_color("transparent")) == pytest.approx(21.0)
    # Transparent text disappears into the background
    assert contrast_ratio(Color(0, 0, 0, 0.0), WHITE) == pytest.approx(1.0)


def test_non_responsive_elements() -> None:
    dark_bg = Color(20, 20, 20)
    samples = [
        ColorSample("#static", "light", BLACK, WHITE),
        ColorSample("#themed", "light", BLACK, WHITE),
        ColorSample("#static", "dark", BLACK, WHITE),
        ColorSample("#themed", "dark", WHITE, dark_bg),
        ColorSample("#light-only", "light", BLACK, WHITE),
    ]

    assert non_responsive_elements(samples) == ["#static"]
