from __future__ import annotations

import pytest

from crosspoint_settings import derived
from crosspoint_settings.enums import (
    FontFamily,
    FontSize,
    FrontButtonHardware,
    LineCompression,
    RefreshFrequency,
    ShortPowerButton,
    SleepTimeout,
)
from crosspoint_settings.record import SettingsRecord, truncate_text


def test_defaults_are_valid() -> None:
    r = SettingsRecord()
    assert r.front_button_mapping() == (0, 1, 2, 3)
    assert r.sleep_timeout_ms() == 10 * 60 * 1000
    assert r.refresh_frequency_pages() == 15
    assert r.reader_font_id() == "bookerly_14"
    assert r.reader_line_compression() == 1.0
    assert r.power_button_duration_ms() == 400


def test_sleep_timeout_table_and_fallback() -> None:
    assert derived.sleep_timeout_ms(SleepTimeout.SLEEP_1_MIN) == 60_000
    assert derived.sleep_timeout_ms(SleepTimeout.SLEEP_5_MIN) == 300_000
    assert derived.sleep_timeout_ms(SleepTimeout.SLEEP_15_MIN) == 900_000
    assert derived.sleep_timeout_ms(SleepTimeout.SLEEP_30_MIN) == 1_800_000
    assert derived.sleep_timeout_ms(42) == 600_000


def test_refresh_frequency_table_and_fallback() -> None:
    assert [derived.refresh_frequency_pages(v) for v in RefreshFrequency] == [1, 5, 10, 15, 30]
    assert derived.refresh_frequency_pages(200) == 15


def test_line_compression() -> None:
    assert derived.reader_line_compression(FontFamily.BOOKERLY, LineCompression.TIGHT) == 0.95
    assert derived.reader_line_compression(FontFamily.BOOKERLY, LineCompression.WIDE) == 1.1
    assert derived.reader_line_compression(FontFamily.NOTOSANS, LineCompression.TIGHT) == 0.90
    assert derived.reader_line_compression(FontFamily.OPENDYSLEXIC, LineCompression.NORMAL) == 0.95
    # Unknown family behaves like Bookerly, unknown spacing like NORMAL.
    assert derived.reader_line_compression(9, LineCompression.WIDE) == 1.1
    assert derived.reader_line_compression(FontFamily.NOTOSANS, 9) == 0.95


def test_reader_font_id() -> None:
    assert derived.reader_font_id(FontFamily.NOTOSANS, FontSize.LARGE) == "notosans_16"
    assert derived.reader_font_id(FontFamily.OPENDYSLEXIC, FontSize.SMALL) == "opendyslexic_8"
    assert derived.reader_font_id(FontFamily.BOOKERLY, FontSize.EXTRA_LARGE) == "bookerly_18"
    assert derived.reader_font_id(FontFamily.OPENDYSLEXIC, 9) == "opendyslexic_10"
    assert derived.reader_font_id(9, 9) == "bookerly_14"


def test_power_button_duration() -> None:
    assert derived.power_button_duration_ms(ShortPowerButton.SLEEP) == 10
    assert derived.power_button_duration_ms(ShortPowerButton.PAGE_TURN) == 400
    assert derived.power_button_duration_ms(ShortPowerButton.IGNORE) == 400


def test_set_validates_like_the_decoder() -> None:
    r = SettingsRecord()
    r.set("font_size", FontSize.SMALL)
    r.set("screen_margin", 255)
    assert r.font_size == FontSize.SMALL
    assert r.screen_margin == 255

    with pytest.raises(ValueError):
        r.set("font_size", len(FontSize))
    with pytest.raises(ValueError):
        r.set("screen_margin", 256)
    with pytest.raises(ValueError):
        r.set("sleep_screen", -1)
    with pytest.raises(TypeError):
        r.set("font_size", "LARGE")
    with pytest.raises(TypeError):
        r.set("hyphenation_enabled", True)
    with pytest.raises(TypeError):
        r.set("opds_username", 5)
    with pytest.raises(KeyError):
        r.set("no_such_setting", 1)


def test_get_returns_enum_members() -> None:
    r = SettingsRecord()
    assert r.get("font_family") is FontFamily.BOOKERLY
    r.font_family = 77  # out of domain: raw value comes back
    assert r.get("font_family") == 77
    assert r.get("screen_margin") == 5


@pytest.mark.parametrize(
    "name,capacity",
    [("opds_server_url", 128), ("opds_username", 64), ("opds_password", 64), ("ble_page_turner_mac", 18)],
)
def test_text_is_truncated_to_capacity(name: str, capacity: int) -> None:
    r = SettingsRecord()
    r.set(name, "x" * 500)
    value = getattr(r, name)
    assert len(value.encode("utf-8")) == capacity - 1


def test_truncate_text_drops_split_multibyte_character() -> None:
    # 2-byte characters into 63 usable bytes: the 32nd would straddle the cut.
    assert truncate_text("é" * 100, 64) == "é" * 31
    assert truncate_text("short", 64) == "short"
    assert truncate_text("ab\x00cd", 64) == "ab"
    assert truncate_text(None, 18) == ""


def test_front_button_mapping_must_be_distinct() -> None:
    r = SettingsRecord()
    r.set_front_button_mapping(
        FrontButtonHardware.LEFT, FrontButtonHardware.RIGHT, FrontButtonHardware.BACK, FrontButtonHardware.CONFIRM
    )
    assert r.front_button_mapping() == (2, 3, 0, 1)

    with pytest.raises(ValueError):
        r.set_front_button_mapping(0, 0, 2, 3)
    assert r.front_button_mapping() == (2, 3, 0, 1)


def test_reset_and_copy_from() -> None:
    r = SettingsRecord()
    r.set("opds_username", "alice")
    r.set("font_family", FontFamily.NOTOSANS)

    other = SettingsRecord()
    other.copy_from(r)
    assert other == r

    r.reset()
    assert r == SettingsRecord()


def test_to_dict_is_plain() -> None:
    d = SettingsRecord().to_dict()
    assert d["font_family"] == 0 and type(d["font_family"]) is int
    assert d["opds_server_url"] == ""
    assert len(d) == len(SettingsRecord.field_names())
