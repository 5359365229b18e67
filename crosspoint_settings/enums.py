"""Enumerated field domains.

Each enum mirrors a firmware setting. The number of members of a domain is the
bound used to validate a stored byte on load (``0 <= value < len(Enum)``).
"""

from __future__ import annotations

from enum import IntEnum


class SleepScreenMode(IntEnum):
    DARK = 0
    LIGHT = 1
    CUSTOM = 2
    COVER = 3
    BLANK = 4
    COVER_CUSTOM = 5


class SleepScreenCoverMode(IntEnum):
    FIT = 0
    CROP = 1


class SleepScreenCoverFilter(IntEnum):
    NO_FILTER = 0
    BLACK_AND_WHITE = 1
    INVERTED_BLACK_AND_WHITE = 2


class StatusBarMode(IntEnum):
    NONE = 0
    NO_PROGRESS = 1
    FULL = 2
    BOOK_PROGRESS_BAR = 3
    ONLY_BOOK_PROGRESS_BAR = 4
    CHAPTER_PROGRESS_BAR = 5


class Orientation(IntEnum):
    PORTRAIT = 0  # 480x800
    LANDSCAPE_CW = 1  # 800x480, top/bottom swapped
    INVERTED = 2  # 480x800
    LANDSCAPE_CCW = 3  # 800x480, native panel orientation


class FrontButtonLayout(IntEnum):
    """Legacy single-value encoding of the front button roles.

    Only read to migrate files that predate the per-button mapping.
    """

    BACK_CONFIRM_LEFT_RIGHT = 0
    LEFT_RIGHT_BACK_CONFIRM = 1
    LEFT_BACK_CONFIRM_RIGHT = 2
    BACK_CONFIRM_RIGHT_LEFT = 3


class FrontButtonHardware(IntEnum):
    """Physical front buttons, in natural hardware order."""

    BACK = 0
    CONFIRM = 1
    LEFT = 2
    RIGHT = 3


class SideButtonLayout(IntEnum):
    PREV_NEXT = 0
    NEXT_PREV = 1


class ButtonModMode(IntEnum):
    OFF = 0
    SIMPLE = 1
    FULL = 2


class FontFamily(IntEnum):
    BOOKERLY = 0
    NOTOSANS = 1
    OPENDYSLEXIC = 2


class FontSize(IntEnum):
    SMALL = 0
    MEDIUM = 1
    LARGE = 2
    EXTRA_LARGE = 3


class LineCompression(IntEnum):
    TIGHT = 0
    NORMAL = 1
    WIDE = 2


class ParagraphAlignment(IntEnum):
    JUSTIFIED = 0
    LEFT_ALIGN = 1
    CENTER_ALIGN = 2
    RIGHT_ALIGN = 3
    BOOK_STYLE = 4


class SleepTimeout(IntEnum):
    SLEEP_1_MIN = 0
    SLEEP_5_MIN = 1
    SLEEP_10_MIN = 2
    SLEEP_15_MIN = 3
    SLEEP_30_MIN = 4


class RefreshFrequency(IntEnum):
    """Pages between full e-ink refreshes."""

    REFRESH_1 = 0
    REFRESH_5 = 1
    REFRESH_10 = 2
    REFRESH_15 = 3
    REFRESH_30 = 4


class ShortPowerButton(IntEnum):
    IGNORE = 0
    SLEEP = 1
    PAGE_TURN = 2


class HideBatteryPercentage(IntEnum):
    NEVER = 0
    READER = 1
    ALWAYS = 2


class UiTheme(IntEnum):
    # Stored as a free byte; the firmware never range-checks it.
    CLASSIC = 0
    LYRA = 1
