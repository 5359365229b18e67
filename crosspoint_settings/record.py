from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from enum import IntEnum
from typing import Any, Dict, Tuple, Type, Union

from . import derived
from .enums import (
    ButtonModMode,
    FontFamily,
    FontSize,
    FrontButtonHardware,
    FrontButtonLayout,
    HideBatteryPercentage,
    LineCompression,
    Orientation,
    ParagraphAlignment,
    RefreshFrequency,
    ShortPowerButton,
    SideButtonLayout,
    SleepScreenCoverFilter,
    SleepScreenCoverMode,
    SleepScreenMode,
    SleepTimeout,
    StatusBarMode,
    UiTheme,
)

# Buffer sizes on the device, terminating NUL included.
OPDS_SERVER_URL_CAPACITY = 128
OPDS_USERNAME_CAPACITY = 64
OPDS_PASSWORD_CAPACITY = 64
BLE_MAC_CAPACITY = 18

ENUM_DOMAINS: Dict[str, Type[IntEnum]] = {
    "sleep_screen": SleepScreenMode,
    "sleep_screen_cover_mode": SleepScreenCoverMode,
    "sleep_screen_cover_filter": SleepScreenCoverFilter,
    "status_bar": StatusBarMode,
    "short_power_button": ShortPowerButton,
    "orientation": Orientation,
    "front_button_layout": FrontButtonLayout,
    "side_button_layout": SideButtonLayout,
    "front_button_back": FrontButtonHardware,
    "front_button_confirm": FrontButtonHardware,
    "front_button_left": FrontButtonHardware,
    "front_button_right": FrontButtonHardware,
    "font_family": FontFamily,
    "font_size": FontSize,
    "line_spacing": LineCompression,
    "paragraph_alignment": ParagraphAlignment,
    "sleep_timeout": SleepTimeout,
    "refresh_frequency": RefreshFrequency,
    "hide_battery_percentage": HideBatteryPercentage,
    "button_mod_mode": ButtonModMode,
}

TEXT_CAPACITY: Dict[str, int] = {
    "opds_server_url": OPDS_SERVER_URL_CAPACITY,
    "opds_username": OPDS_USERNAME_CAPACITY,
    "opds_password": OPDS_PASSWORD_CAPACITY,
    "ble_page_turner_mac": BLE_MAC_CAPACITY,
}

FRONT_BUTTON_FIELDS: Tuple[str, ...] = (
    "front_button_back",
    "front_button_confirm",
    "front_button_left",
    "front_button_right",
)

DEFAULT_FRONT_BUTTON_MAPPING: Tuple[int, int, int, int] = (
    FrontButtonHardware.BACK,
    FrontButtonHardware.CONFIRM,
    FrontButtonHardware.LEFT,
    FrontButtonHardware.RIGHT,
)


def truncate_text(value: str, capacity: int) -> str:
    """Cut ``value`` so its UTF-8 form fits a ``capacity``-byte C buffer.

    One byte is reserved for the terminating NUL. A multi-byte character split
    by the cut is dropped rather than kept half-encoded.
    """
    raw = str(value or "").encode("utf-8")
    # Embedded NULs would end the string early on the device.
    raw = raw.split(b"\x00", 1)[0]
    if len(raw) <= capacity - 1:
        return raw.decode("utf-8")
    return raw[: capacity - 1].decode("utf-8", errors="ignore")


@dataclass
class SettingsRecord:
    """Every persisted user preference, at its firmware default.

    Enumerated fields hold plain ints in ``[0, len(domain))``; see
    ``ENUM_DOMAINS``. Text fields are kept within ``TEXT_CAPACITY``.
    Derived values (timeouts, fonts, refresh cadence) are computed on demand
    and never stored.
    """

    # Sleep screen
    sleep_screen: int = SleepScreenMode.DARK
    sleep_screen_cover_mode: int = SleepScreenCoverMode.FIT
    sleep_screen_cover_filter: int = SleepScreenCoverFilter.NO_FILTER
    status_bar: int = StatusBarMode.FULL

    # Text rendering
    extra_paragraph_spacing: int = 1
    text_anti_aliasing: int = 1

    short_power_button: int = ShortPowerButton.IGNORE
    orientation: int = Orientation.PORTRAIT

    # Button layouts. front_button_layout is kept only to migrate old files.
    front_button_layout: int = FrontButtonLayout.BACK_CONFIRM_LEFT_RIGHT
    side_button_layout: int = SideButtonLayout.PREV_NEXT

    # Logical role -> physical front button
    front_button_back: int = FrontButtonHardware.BACK
    front_button_confirm: int = FrontButtonHardware.CONFIRM
    front_button_left: int = FrontButtonHardware.LEFT
    front_button_right: int = FrontButtonHardware.RIGHT

    # Reader font
    font_family: int = FontFamily.BOOKERLY
    font_size: int = FontSize.MEDIUM
    line_spacing: int = LineCompression.NORMAL
    paragraph_alignment: int = ParagraphAlignment.JUSTIFIED

    sleep_timeout: int = SleepTimeout.SLEEP_10_MIN
    refresh_frequency: int = RefreshFrequency.REFRESH_15
    hyphenation_enabled: int = 0
    screen_margin: int = 5

    # OPDS browser
    opds_server_url: str = ""
    opds_username: str = ""
    opds_password: str = ""

    # BLE page turner
    ble_page_turner_mac: str = ""

    hide_battery_percentage: int = HideBatteryPercentage.NEVER
    long_press_chapter_skip: int = 1
    ui_theme: int = UiTheme.LYRA
    # Sunlight fading compensation
    fading_fix: int = 0
    embedded_style: int = 1
    button_mod_mode: int = ButtonModMode.FULL

    # Typed access -----------------------------------------------------------
    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def get(self, name: str) -> Union[int, str, IntEnum]:
        if name not in self.field_names():
            raise KeyError(name)
        value = getattr(self, name)
        domain = ENUM_DOMAINS.get(name)
        if domain is not None and 0 <= int(value) < len(domain):
            return domain(int(value))
        return value

    def set(self, name: str, value: Any) -> None:
        """Set one field, validating it the way load would.

        Raises KeyError for unknown names and ValueError for values that the
        decoder would reject.
        """
        if name not in self.field_names():
            raise KeyError(name)

        if name in TEXT_CAPACITY:
            if not isinstance(value, str):
                raise TypeError(f"{name} expects a string, got {type(value).__name__}")
            setattr(self, name, truncate_text(value, TEXT_CAPACITY[name]))
            return

        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{name} expects an integer, got {type(value).__name__}")
        value = int(value)

        domain = ENUM_DOMAINS.get(name)
        if domain is not None:
            if not 0 <= value < len(domain):
                raise ValueError(f"{name}={value} is outside [0, {len(domain)})")
        elif not 0 <= value <= 0xFF:
            raise ValueError(f"{name}={value} does not fit in a byte")
        setattr(self, name, value)

    def reset(self) -> None:
        """Restore every field to its default, in place."""
        defaults = SettingsRecord()
        for name in self.field_names():
            setattr(self, name, getattr(defaults, name))

    def copy_from(self, other: "SettingsRecord") -> None:
        for name in self.field_names():
            setattr(self, name, getattr(other, name))

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        for name in ENUM_DOMAINS:
            out[name] = int(out[name])
        return out

    # Front button mapping ---------------------------------------------------
    def front_button_mapping(self) -> Tuple[int, int, int, int]:
        """(back, confirm, left, right) -> physical button ids."""
        return (
            self.front_button_back,
            self.front_button_confirm,
            self.front_button_left,
            self.front_button_right,
        )

    def set_front_button_mapping(self, back: int, confirm: int, left: int, right: int) -> None:
        mapping = (back, confirm, left, right)
        if len(set(int(v) for v in mapping)) != len(mapping):
            raise ValueError(f"front button mapping must be distinct, got {mapping}")
        for name, value in zip(FRONT_BUTTON_FIELDS, mapping):
            self.set(name, value)

    def reset_front_button_mapping(self) -> None:
        for name, value in zip(FRONT_BUTTON_FIELDS, DEFAULT_FRONT_BUTTON_MAPPING):
            setattr(self, name, value)

    # Derived values ---------------------------------------------------------
    def sleep_timeout_ms(self) -> int:
        return derived.sleep_timeout_ms(self.sleep_timeout)

    def refresh_frequency_pages(self) -> int:
        return derived.refresh_frequency_pages(self.refresh_frequency)

    def reader_line_compression(self) -> float:
        return derived.reader_line_compression(self.font_family, self.line_spacing)

    def reader_font_id(self) -> str:
        return derived.reader_font_id(self.font_family, self.font_size)

    def power_button_duration_ms(self) -> int:
        return derived.power_button_duration_ms(self.short_power_button)

    def derived_values(self) -> Dict[str, Any]:
        return {
            "sleep_timeout_ms": self.sleep_timeout_ms(),
            "refresh_frequency_pages": self.refresh_frequency_pages(),
            "reader_line_compression": self.reader_line_compression(),
            "reader_font_id": self.reader_font_id(),
            "power_button_duration_ms": self.power_button_duration_ms(),
        }
