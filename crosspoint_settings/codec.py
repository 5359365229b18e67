"""Binary encode/decode of the settings record.

File layout::

    uint8   version        (SETTINGS_FILE_VERSION)
    uint8   field_count    (number of SCHEMA steps written)
    ...     one entry per step, in SCHEMA order:
              uint8                      enum / free byte fields
              uint32 (LE) length + bytes text fields (UTF-8)

SCHEMA is append-only. A file from an older build is a strict prefix of the
current order, so decoding stops after ``field_count`` steps and everything
past that point keeps its default.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple, Type

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
)
from .record import (
    BLE_MAC_CAPACITY,
    DEFAULT_FRONT_BUTTON_MAPPING,
    FRONT_BUTTON_FIELDS,
    OPDS_PASSWORD_CAPACITY,
    OPDS_SERVER_URL_CAPACITY,
    OPDS_USERNAME_CAPACITY,
    SettingsRecord,
    truncate_text,
)

logger = logging.getLogger(__name__)

SETTINGS_FILE_VERSION = 1

_U8 = struct.Struct("<B")
_LEN = struct.Struct("<I")


@dataclass(frozen=True)
class FieldSpec:
    """One encode/decode step.

    kind:
      - 'enum': single byte, kept on load only if ``< bound``
      - 'byte': single byte, no range check
      - 'text': length-prefixed string, truncated to ``bound`` (buffer capacity)
    """

    name: str
    kind: str
    bound: int = 0
    domain: Optional[Type[IntEnum]] = None


def _enum(name: str, domain: Type[IntEnum]) -> FieldSpec:
    return FieldSpec(name, "enum", len(domain), domain)


def _byte(name: str) -> FieldSpec:
    return FieldSpec(name, "byte")


def _text(name: str, capacity: int) -> FieldSpec:
    return FieldSpec(name, "text", capacity)


# Wire order. Append new fields at the end only; never reorder or remove.
SCHEMA: Tuple[FieldSpec, ...] = (
    _enum("sleep_screen", SleepScreenMode),
    _byte("extra_paragraph_spacing"),
    _enum("short_power_button", ShortPowerButton),
    _enum("status_bar", StatusBarMode),
    _enum("orientation", Orientation),
    _enum("front_button_layout", FrontButtonLayout),
    _enum("side_button_layout", SideButtonLayout),
    _enum("font_family", FontFamily),
    _enum("font_size", FontSize),
    _enum("line_spacing", LineCompression),
    _enum("paragraph_alignment", ParagraphAlignment),
    _enum("sleep_timeout", SleepTimeout),
    _enum("refresh_frequency", RefreshFrequency),
    _byte("screen_margin"),
    _enum("sleep_screen_cover_mode", SleepScreenCoverMode),
    _text("opds_server_url", OPDS_SERVER_URL_CAPACITY),
    _byte("text_anti_aliasing"),
    _enum("hide_battery_percentage", HideBatteryPercentage),
    _byte("long_press_chapter_skip"),
    _byte("hyphenation_enabled"),
    _text("opds_username", OPDS_USERNAME_CAPACITY),
    _text("opds_password", OPDS_PASSWORD_CAPACITY),
    _enum("sleep_screen_cover_filter", SleepScreenCoverFilter),
    _byte("ui_theme"),
    _enum("front_button_back", FrontButtonHardware),
    _enum("front_button_confirm", FrontButtonHardware),
    _enum("front_button_left", FrontButtonHardware),
    _enum("front_button_right", FrontButtonHardware),
    _byte("fading_fix"),
    _byte("embedded_style"),
    _enum("button_mod_mode", ButtonModMode),
    _text("ble_page_turner_mac", BLE_MAC_CAPACITY),
)

# Number of steps this build writes.
SETTINGS_COUNT = len(SCHEMA)

# The remap counts as present only once its last step has been decoded.
_FRONT_BUTTON_MAPPING_LAST = FRONT_BUTTON_FIELDS[-1]

# Legacy layout -> (back, confirm, left, right) physical buttons.
LEGACY_LAYOUT_MAPPING = {
    FrontButtonLayout.BACK_CONFIRM_LEFT_RIGHT: DEFAULT_FRONT_BUTTON_MAPPING,
    FrontButtonLayout.LEFT_RIGHT_BACK_CONFIRM: (
        FrontButtonHardware.LEFT,
        FrontButtonHardware.RIGHT,
        FrontButtonHardware.BACK,
        FrontButtonHardware.CONFIRM,
    ),
    FrontButtonLayout.LEFT_BACK_CONFIRM_RIGHT: (
        FrontButtonHardware.CONFIRM,
        FrontButtonHardware.LEFT,
        FrontButtonHardware.BACK,
        FrontButtonHardware.RIGHT,
    ),
    FrontButtonLayout.BACK_CONFIRM_RIGHT_LEFT: (
        FrontButtonHardware.BACK,
        FrontButtonHardware.CONFIRM,
        FrontButtonHardware.RIGHT,
        FrontButtonHardware.LEFT,
    ),
}


class TruncatedRecordError(ValueError):
    """The byte stream ended in the middle of a field."""


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = memoryview(data)
        self._pos = 0

    def remaining(self) -> int:
        return len(self._data) - self._pos

    def take(self, n: int) -> bytes:
        if n > self.remaining():
            raise TruncatedRecordError(f"need {n} bytes at offset {self._pos}, have {self.remaining()}")
        chunk = bytes(self._data[self._pos : self._pos + n])
        self._pos += n
        return chunk

    def u8(self) -> int:
        return _U8.unpack(self.take(1))[0]

    def string(self) -> str:
        (length,) = _LEN.unpack(self.take(_LEN.size))
        return self.take(length).decode("utf-8", errors="replace")


# Encode ---------------------------------------------------------------------


def _encode_field(buf: bytearray, spec: FieldSpec, value) -> None:
    if spec.kind == "text":
        raw = truncate_text(value, spec.bound).encode("utf-8")
        buf += _LEN.pack(len(raw))
        buf += raw
    else:
        buf += _U8.pack(int(value) & 0xFF)


def encode_settings(record: SettingsRecord) -> bytes:
    """Serialize every field of ``record`` in SCHEMA order."""
    buf = bytearray()
    buf += _U8.pack(SETTINGS_FILE_VERSION)
    buf += _U8.pack(SETTINGS_COUNT)
    for spec in SCHEMA:
        _encode_field(buf, spec, getattr(record, spec.name))
    return bytes(buf)


# Decode ---------------------------------------------------------------------


def _decode_field(reader: _Reader, record: SettingsRecord, spec: FieldSpec) -> None:
    if spec.kind == "text":
        setattr(record, spec.name, truncate_text(reader.string(), spec.bound))
        return

    raw = reader.u8()
    if spec.kind == "enum" and raw >= spec.bound:
        logger.debug("Ignoring out-of-range %s=%d (bound %d)", spec.name, raw, spec.bound)
        return
    setattr(record, spec.name, raw)


def validate_front_button_mapping(record: SettingsRecord) -> bool:
    """Reset the front button remap to hardware order if any two roles collide.

    Returns True when the mapping was left untouched.
    """
    mapping = record.front_button_mapping()
    if len(set(mapping)) == len(mapping):
        return True
    logger.warning("Duplicate front button mapping %s, restoring defaults", tuple(mapping))
    record.reset_front_button_mapping()
    return False


def apply_legacy_front_button_layout(record: SettingsRecord) -> None:
    """Derive the per-button remap from the legacy single-value layout."""
    mapping = LEGACY_LAYOUT_MAPPING.get(record.front_button_layout, DEFAULT_FRONT_BUTTON_MAPPING)
    for name, value in zip(FRONT_BUTTON_FIELDS, mapping):
        setattr(record, name, int(value))


def decode_settings(data: bytes, record: Optional[SettingsRecord] = None) -> Tuple[SettingsRecord, bool]:
    """Decode ``data`` into ``record`` (a default record when omitted).

    Only fields present in the file are overwritten. Returns ``(record, ok)``;
    ``ok`` is False only on a missing or unsupported version byte, in which
    case ``record`` is left exactly as it was passed in.
    """
    if record is None:
        record = SettingsRecord()

    reader = _Reader(bytes(data or b""))
    try:
        version = reader.u8()
    except TruncatedRecordError:
        logger.warning("Deserialization failed: empty settings data")
        return record, False
    if version != SETTINGS_FILE_VERSION:
        logger.warning("Deserialization failed: Unknown version %d", version)
        return record, False

    try:
        file_count = reader.u8()
    except TruncatedRecordError:
        file_count = 0

    if file_count > SETTINGS_COUNT:
        logger.info("Settings file has %d fields, this build knows %d", file_count, SETTINGS_COUNT)

    mapping_read = False
    decoded = 0
    for spec in SCHEMA[:file_count]:
        try:
            _decode_field(reader, record, spec)
        except TruncatedRecordError as exc:
            logger.warning("Settings data truncated at %s (%s); keeping defaults from here", spec.name, exc)
            break
        decoded += 1
        if spec.name == _FRONT_BUTTON_MAPPING_LAST:
            mapping_read = True

    if mapping_read:
        validate_front_button_mapping(record)
    else:
        apply_legacy_front_button_layout(record)

    logger.debug("Decoded %d of %d settings fields", decoded, file_count)
    return record, True
