from terrain_profile.formatters import (
    computing_message,
    format_distance,
    format_elevation,
    point_a_selected_message,
    step_label,
    success_message,
)
from terrain_profile.models import PathSummary


class TestFormatters:
    def test_format_distance(self):
        assert format_distance(10_950.56) == "10.95 km"
        assert format_distance(0.0) == "0.00 km"

    def test_format_elevation(self):
        assert format_elevation(123.6) == "124 m"

    def test_success_message(self):
        summary = PathSummary(
            total_distance=10_950.0,
            start_elevation=100.0,
            end_elevation=80.0,
            min_elevation=80.0,
            max_elevation=150.0,
        )
        msg = success_message(summary)
        assert "10.95 km" in msg
        assert "100 m -> 80 m" in msg
        assert "Highest: 150 m" in msg
        assert "Lowest: 80 m" in msg

    def test_computing_message(self):
        assert "1.50 km" in computing_message(1500.0)

    def test_step_labels(self):
        assert step_label(1) == "Step 1: choose point A"
        assert step_label(2) == "Step 2: choose point B"
        assert step_label(3) == "Done"

    def test_point_a_selected_message_asks_for_b(self):
        assert point_a_selected_message() == "Point A selected. Click again to choose point B."
