"""Tests for alert message composition."""

from bbmonitor.alerts.formatter import NEW_RECORD_MARKER, format_alert, format_timestamp
from bbmonitor.models import CycleExtremes, ExtremeRecord, Records

CURRENT = CycleExtremes(
    positive=ExtremeRecord("BTCUSDT", 4.2149, "2024-05-01T12:34:00.000Z"),
    negative=ExtremeRecord("ETHUSDT", -2.1, "2024-05-01T12:34:00.000Z"),
)


class TestFormatAlert:
    def test_first_cycle_message(self) -> None:
        """No prior records: current lines, no all-time lines, new-record marker.

        The first cycle always beats the empty records, so both flags are set.
        """
        message = format_alert(CURRENT, Records(), True, True)

        assert message.startswith("BTCUSDT 4.21% above\n\nETHUSDT -2.10% below\n\n")
        assert "All-time" not in message
        assert message.endswith(NEW_RECORD_MARKER)

    def test_all_time_lines_with_timestamps(self) -> None:
        alltime = Records(
            highest_positive=ExtremeRecord("SOLUSDT", 7.5, "2024-04-01T08:15:00.000Z"),
            highest_negative=ExtremeRecord("DOGEUSDT", -9.123, "2024-04-02T09:30:00.000Z"),
        )
        message = format_alert(CURRENT, alltime, False, False)

        assert (
            "All-time high above: SOLUSDT 7.50% (2024-04-01 08:15:00 UTC)\n"
            "All-time high below: DOGEUSDT -9.12% (2024-04-02 09:30:00 UTC)"
        ) in message
        assert NEW_RECORD_MARKER not in message

    def test_all_time_line_without_timestamp(self) -> None:
        alltime = Records(highest_positive=ExtremeRecord("SOLUSDT", 7.5, None))
        message = format_alert(CURRENT, alltime, False, False)

        assert message.endswith("All-time high above: SOLUSDT 7.50%")
        assert "All-time high below" not in message

    def test_marker_when_only_one_side_is_new(self) -> None:
        alltime = Records(
            highest_positive=ExtremeRecord("SOLUSDT", 1.0, None),
            highest_negative=ExtremeRecord("DOGEUSDT", -9.0, None),
        )
        message = format_alert(CURRENT, alltime, True, False)

        assert message.endswith(f"\n\n{NEW_RECORD_MARKER}")
        assert message.count(NEW_RECORD_MARKER) == 1

    def test_record_without_symbol_is_not_listed(self) -> None:
        alltime = Records(highest_negative=ExtremeRecord(None, -4.0, None))
        message = format_alert(CURRENT, alltime, False, False)
        assert "All-time" not in message


class TestFormatTimestamp:
    def test_iso_z_suffix(self) -> None:
        assert format_timestamp("2024-05-01T12:34:56.789Z") == "2024-05-01 12:34:56 UTC"

    def test_offset_is_converted_to_utc(self) -> None:
        assert format_timestamp("2024-05-01T14:00:00+02:00") == "2024-05-01 12:00:00 UTC"

    def test_naive_is_treated_as_utc(self) -> None:
        assert format_timestamp("2024-05-01T12:00:00") == "2024-05-01 12:00:00 UTC"

    def test_unparseable_is_returned_unchanged(self) -> None:
        assert format_timestamp("yesterday") == "yesterday"

    def test_non_string_is_rendered_as_text(self) -> None:
        assert format_timestamp(1714564440000) == "1714564440000"  # type: ignore[arg-type]
