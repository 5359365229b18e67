"""Runtime values derived from stored enum fields.

None of these are persisted: the file only stores the enum index, so the
presentation constants below can change between builds without touching the
format. Every lookup has an explicit fallback for values outside the table.
"""

from __future__ import annotations

from typing import Dict

from .enums import (
    FontFamily,
    FontSize,
    LineCompression,
    RefreshFrequency,
    ShortPowerButton,
    SleepTimeout,
)

_MINUTE_MS = 60 * 1000

SLEEP_TIMEOUT_MS: Dict[int, int] = {
    SleepTimeout.SLEEP_1_MIN: 1 * _MINUTE_MS,
    SleepTimeout.SLEEP_5_MIN: 5 * _MINUTE_MS,
    SleepTimeout.SLEEP_10_MIN: 10 * _MINUTE_MS,
    SleepTimeout.SLEEP_15_MIN: 15 * _MINUTE_MS,
    SleepTimeout.SLEEP_30_MIN: 30 * _MINUTE_MS,
}
DEFAULT_SLEEP_TIMEOUT = SleepTimeout.SLEEP_10_MIN

REFRESH_PAGES: Dict[int, int] = {
    RefreshFrequency.REFRESH_1: 1,
    RefreshFrequency.REFRESH_5: 5,
    RefreshFrequency.REFRESH_10: 10,
    RefreshFrequency.REFRESH_15: 15,
    RefreshFrequency.REFRESH_30: 30,
}
DEFAULT_REFRESH = RefreshFrequency.REFRESH_15

# family -> spacing -> line height multiplier
LINE_COMPRESSION: Dict[int, Dict[int, float]] = {
    FontFamily.BOOKERLY: {
        LineCompression.TIGHT: 0.95,
        LineCompression.NORMAL: 1.0,
        LineCompression.WIDE: 1.1,
    },
    FontFamily.NOTOSANS: {
        LineCompression.TIGHT: 0.90,
        LineCompression.NORMAL: 0.95,
        LineCompression.WIDE: 1.0,
    },
    FontFamily.OPENDYSLEXIC: {
        LineCompression.TIGHT: 0.90,
        LineCompression.NORMAL: 0.95,
        LineCompression.WIDE: 1.0,
    },
}

# family -> size -> font resource id. OpenDyslexic runs large, so its point
# sizes are shifted down.
READER_FONT_IDS: Dict[int, Dict[int, str]] = {
    FontFamily.BOOKERLY: {
        FontSize.SMALL: "bookerly_12",
        FontSize.MEDIUM: "bookerly_14",
        FontSize.LARGE: "bookerly_16",
        FontSize.EXTRA_LARGE: "bookerly_18",
    },
    FontFamily.NOTOSANS: {
        FontSize.SMALL: "notosans_12",
        FontSize.MEDIUM: "notosans_14",
        FontSize.LARGE: "notosans_16",
        FontSize.EXTRA_LARGE: "notosans_18",
    },
    FontFamily.OPENDYSLEXIC: {
        FontSize.SMALL: "opendyslexic_8",
        FontSize.MEDIUM: "opendyslexic_10",
        FontSize.LARGE: "opendyslexic_12",
        FontSize.EXTRA_LARGE: "opendyslexic_14",
    },
}
DEFAULT_FONT_FAMILY = FontFamily.BOOKERLY

POWER_BUTTON_SLEEP_MS = 10
POWER_BUTTON_DEFAULT_MS = 400


def sleep_timeout_ms(sleep_timeout: int) -> int:
    return SLEEP_TIMEOUT_MS.get(sleep_timeout, SLEEP_TIMEOUT_MS[DEFAULT_SLEEP_TIMEOUT])


def refresh_frequency_pages(refresh_frequency: int) -> int:
    """Number of page turns between two full e-ink refreshes."""
    return REFRESH_PAGES.get(refresh_frequency, REFRESH_PAGES[DEFAULT_REFRESH])


def reader_line_compression(font_family: int, line_spacing: int) -> float:
    by_spacing = LINE_COMPRESSION.get(font_family, LINE_COMPRESSION[DEFAULT_FONT_FAMILY])
    return by_spacing.get(line_spacing, by_spacing[LineCompression.NORMAL])


def reader_font_id(font_family: int, font_size: int) -> str:
    by_size = READER_FONT_IDS.get(font_family, READER_FONT_IDS[DEFAULT_FONT_FAMILY])
    return by_size.get(font_size, by_size[FontSize.MEDIUM])


def power_button_duration_ms(short_power_button: int) -> int:
    # Sleep-on-short-press needs a near-instant press threshold.
    if short_power_button == ShortPowerButton.SLEEP:
        return POWER_BUTTON_SLEEP_MS
    return POWER_BUTTON_DEFAULT_MS
