"""Tests for mplayer answer parsing."""

import pytest

from mplayer_control.domain.playback.parser import StatusUpdate, parse_status_line


class TestParseStatusLine:
    """Tests for parse_status_line function."""

    def test_duration(self) -> None:
        assert parse_status_line("ANS_LENGTH=312.45") == StatusUpdate("duration", 312.45)

    def test_time_position(self) -> None:
        assert parse_status_line("ANS_TIME_POSITION=12.3") == StatusUpdate("time", 12.3)

    def test_volume(self) -> None:
        assert parse_status_line("ANS_volume=50.000000") == StatusUpdate("volume", 50.0)

    @pytest.mark.parametrize("raw, expected", [("7", 7.0), ("7.5", 7.5), ("0.000001", 1e-06)])
    def test_any_precision(self, raw: str, expected: float) -> None:
        assert parse_status_line(f"ANS_TIME_POSITION={raw}").value == expected

    def test_marker_inside_line(self) -> None:
        assert parse_status_line("  ANS_LENGTH=10.00\r") == StatusUpdate("duration", 10.0)

    @pytest.mark.parametrize(
        "line",
        [
            "",
            "MPlayer SVN-r38417 (C) 2000-2023 MPlayer Team",
            "Playing sample.mp3.",
            "ANS_FILENAME='sample.mp3'",
            "ANS_percent_pos=12",
            "A:   1.2 (01.2) of 300.0 (05:00.0)  0.3%",
        ],
    )
    def test_unrecognized_lines_ignored(self, line: str) -> None:
        assert parse_status_line(line) is None

    def test_non_numeric_value_ignored(self) -> None:
        assert parse_status_line("ANS_LENGTH=unknown") is None

    def test_volume_marker_is_case_sensitive(self) -> None:
        assert parse_status_line("ANS_VOLUME=50") is None
