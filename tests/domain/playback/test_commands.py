"""Tests for slave-mode command encoding."""

import pytest

from mplayer_control.domain.playback.commands import (
    PAUSING_KEEP,
    PAUSING_KEEP_FORCE,
    SeekMode,
    VolumeMode,
    encode_command,
    preserve_flag,
)


class TestPreserveFlag:
    """Tests for preserve_flag function."""

    @pytest.mark.parametrize(
        "name", ["pause", "stop", "mute", "volume", "get_time_pos", "loop", "speed_set"]
    )
    def test_force_flag_by_default(self, name: str) -> None:
        assert preserve_flag(name) == PAUSING_KEEP_FORCE

    def test_seek_uses_keep_only(self) -> None:
        assert preserve_flag("seek") == PAUSING_KEEP


class TestEncodeCommand:
    """Tests for encode_command function."""

    def test_no_arguments(self) -> None:
        assert encode_command("get_time_pos") == "pausing_keep_force get_time_pos"

    def test_arguments_in_order(self) -> None:
        assert encode_command("get_property", "volume") == (
            "pausing_keep_force get_property volume"
        )

    def test_seek_absolute(self) -> None:
        assert encode_command("seek", 123, SeekMode.ABSOLUTE) == "pausing_keep seek 123 2"

    def test_seek_percentage(self) -> None:
        assert encode_command("seek", 50, SeekMode.PERCENTAGE) == "pausing_keep seek 50 1"

    def test_negative_relative_volume(self) -> None:
        assert encode_command("volume", -10, VolumeMode.RELATIVE) == (
            "pausing_keep_force volume -10 0"
        )

    def test_booleans_render_as_digits(self) -> None:
        assert encode_command("mute", True) == "pausing_keep_force mute 1"
        assert encode_command("mute", False) == "pausing_keep_force mute 0"

    def test_float_argument(self) -> None:
        assert encode_command("speed_set", 1.5) == "pausing_keep_force speed_set 1.5"

    def test_no_trailing_newline(self) -> None:
        assert not encode_command("stop").endswith("\n")
