"""Tests for the custom filters example."""


class TestCustomFiltersApp:
    def test_output(self, example_app) -> None:
        assert example_app.output == "3 items, total €1,234.50, ACME"

    def test_singular_and_default(self, example_app) -> None:
        assert example_app.single == "1 item, total €5.00, GUEST"
