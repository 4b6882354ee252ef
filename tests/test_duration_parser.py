import pytest

from app.services.duration_parser import DurationParser, is_fresher_phrase, parse_duration
from datetime import date


@pytest.fixture
def parser():
    # "now" is March 2024
    return DurationParser(2024, 3)


class TestDurationParser:
    """Date/range expressions to fractional years"""

    def test_year_range(self, parser):
        assert parser.parse("2023-2024") == 1.0

    def test_year_range_with_to(self, parser):
        assert parser.parse("2019 to 2022") == 3.0

    def test_named_month_range(self, parser):
        assert parser.parse("Jan 2023 - Dec 2024") == pytest.approx(22 / 12)

    @pytest.mark.parametrize("named, numeric", [
        ("Jan 2023 - Jan 2024", "01/2023 - 01/2024"),
        ("Mar 2020 - Sep 2021", "03/2020 - 09/2021"),
    ])
    def test_named_months_count_one_month_less_than_numeric(self, parser, named, numeric):
        # named ranges count the months strictly between the endpoints
        assert parser.parse(numeric) - parser.parse(named) == pytest.approx(1 / 12)

    def test_adjacent_named_months_are_zero(self, parser):
        assert parser.parse("Jan 2023 - Feb 2023") == 0.0
        assert parser.parse("01/2023 - 02/2023") == pytest.approx(1 / 12)

    def test_open_month_year(self, parser):
        assert parser.parse("01/2023-") == pytest.approx(14 / 12)

    def test_month_year_range(self, parser):
        assert parser.parse("06/2020 - 09/2021") == pytest.approx(15 / 12)

    def test_open_year(self, parser):
        # (2024 - 2022) * 12 + (3 - 1)
        assert parser.parse("2022-") == pytest.approx(26 / 12)

    @pytest.mark.parametrize("text", ["2022 to Present", "2022 - current", "2022-now"])
    def test_year_to_present(self, parser, text):
        assert parser.parse(text) == pytest.approx(26 / 12)

    def test_en_dash_is_a_separator(self, parser):
        assert parser.parse("2020 – 2023") == 3.0

    @pytest.mark.parametrize("token", ["present", "Current", " NOW ", "ongoing"])
    def test_present_token_defers(self, parser, token):
        assert parser.parse(token) is None

    def test_single_year_current_vs_past(self):
        assert DurationParser(2024, 6).parse("2024") == 0.5
        assert DurationParser(2025, 6).parse("2024") == 1.0

    def test_bare_year_found_in_prose(self, parser):
        assert parser.parse("Worked there in 2019") == 1.0

    @pytest.mark.parametrize("text", ["", "a while", "many years"])
    def test_unrecognised(self, parser, text):
        assert parser.parse(text) == 0.0

    def test_reversed_ranges_clamp_to_zero(self, parser):
        assert parser.parse("2024-2020") == 0.0
        assert parser.parse("05/2022 - 01/2022") == 0.0
        assert parser.parse("2030-") == 0.0

    def test_invalid_month_rejected(self):
        with pytest.raises(ValueError):
            DurationParser(2024, 13)

    def test_from_date(self):
        p = DurationParser.from_date(date(2024, 3, 31))
        assert (p.current_year, p.current_month) == (2024, 3)

    def test_module_function(self):
        assert parse_duration("01/2023-", current_year=2024, current_month=3) == pytest.approx(14 / 12)


class TestFresherPhrases:

    def test_known_phrases(self):
        assert is_fresher_phrase("Fresher")
        assert is_fresher_phrase("Entry level developer")

    def test_other_text(self):
        assert not is_fresher_phrase("5 years in fintech")
