"""Tests for the phone number widget and the country table."""

import phonenumbers
import pytest

from straqa.services.countries import build_country_table, get_country_table
from straqa.services.country_data import COUNTRY_LABELS
from straqa.services.phone_input import PhoneInput, SelectorState, normalize_phone


class TestNormalizePhone:
    """Tests for normalize_phone."""

    def test_national_number(self):
        """A national number is formatted with the country's dial code."""
        assert normalize_phone("0803 123 4567", "NG") == "+2348031234567"

    def test_international_number_ignores_country(self):
        """Text starting with + is read as international."""
        assert normalize_phone("+1 650-253-0000", "NG") == "+16502530000"

    def test_complete_length_number_is_kept(self):
        """A number of full length is kept even if no carrier uses its prefix."""
        assert normalize_phone("+2340000000000", "NG") == "+2340000000000"

    @pytest.mark.parametrize("text", ["", "   ", "123", "not a number", "0803", "0803 123"])
    def test_incomplete_is_empty(self, text):
        """Empty, short or local-only input yields an empty string."""
        assert normalize_phone(text, "NG") == ""


class TestCountryTable:
    """Tests for the country lookup table."""

    def test_loaded_once(self):
        """The process-wide table is built once."""
        assert get_country_table() is get_country_table()

    def test_lookup(self):
        """Countries are found by ISO code, case-insensitively."""
        table = get_country_table()

        nigeria = table.get("ng")

        assert nigeria.label == "Nigeria"
        assert nigeria.dial_code == 234
        assert nigeria.dial_prefix == "+234"
        assert nigeria.flag == "\U0001F1F3\U0001F1EC"
        assert "NG" in table
        assert "ZZ" not in table

    def test_table_is_immutable(self):
        """Options are a tuple and the index a read-only mapping."""
        table = get_country_table()

        assert isinstance(table.options, tuple)
        with pytest.raises(TypeError):
            table._by_code["ZZ"] = table.get("NG")

    def test_skips_countries_without_calling_code(self):
        """Unknown regions are left out."""
        table = build_country_table(("NG", "ZZ"))

        assert len(table) == 1
        assert table.get("ZZ") is None

    def test_missing_label_falls_back_to_code(self):
        table = build_country_table(("NG",), labels={})

        assert table.get("NG").label == "NG"

    def test_every_phone_region_has_a_label(self):
        """Display names cover exactly the regions the phone metadata knows."""
        assert set(COUNTRY_LABELS) == set(phonenumbers.SUPPORTED_REGIONS)
        assert len(get_country_table()) == len(phonenumbers.SUPPORTED_REGIONS)

    def test_search(self):
        """Search matches names, codes and dial codes."""
        table = get_country_table()

        assert [c.code for c in table.search("+234")] == ["NG"]
        assert "NG" in [c.code for c in table.search("nigeria")]
        assert "GB" in [c.code for c in table.search("gb")]
        assert len(table.search("")) == len(table)


class TestPhoneInput:
    """Tests for the PhoneInput state machine."""

    def test_initial_state(self):
        """Starts collapsed with Nigeria selected and no value."""
        phone = PhoneInput()

        assert phone.state == SelectorState.COLLAPSED
        assert phone.country.code == "NG"
        assert phone.value == ""
        assert phone.options == []

    def test_unknown_default_country(self):
        """An unknown default country is rejected."""
        with pytest.raises(ValueError):
            PhoneInput(default_country="ZZ")

    def test_open_and_search(self):
        """Opening shows the full list; searching filters it."""
        phone = PhoneInput()

        options = phone.open()

        assert phone.is_expanded
        assert len(options) == len(get_country_table())

        filtered = phone.search("united")
        codes = [c.code for c in filtered]
        assert "GB" in codes
        assert "US" in codes
        assert "NG" not in codes

    def test_select_commits_and_collapses(self):
        """Selecting a country commits it and collapses the list."""
        phone = PhoneInput()
        phone.open()

        phone.select("GB")

        assert phone.state == SelectorState.COLLAPSED
        assert phone.country.code == "GB"
        assert phone.query == ""

    def test_select_unknown_country(self):
        """Selecting an unknown code raises and keeps the current country."""
        phone = PhoneInput()

        with pytest.raises(ValueError):
            phone.select("ZZ")

        assert phone.country.code == "NG"

    def test_typing_updates_value_live(self):
        """Typing yields the E.164 value once the number is complete."""
        changes = []
        phone = PhoneInput(on_change=changes.append)

        assert phone.type("0803") == ""
        assert phone.type("0803 123 4567") == "+2348031234567"
        assert changes == ["+2348031234567"]

        assert phone.type("0803 123") == ""
        assert changes == ["+2348031234567", ""]

    def test_typing_for_selected_country(self):
        """National numbers are read in the selected country's format."""
        phone = PhoneInput()
        phone.select("GB")

        assert phone.type("020 7031 3000") == "+442070313000"

    def test_country_change_renormalizes(self):
        """Selecting another country re-reads the typed text."""
        phone = PhoneInput()
        phone.type("0803 123 4567")
        assert phone.value == "+2348031234567"

        phone.select("US")

        assert phone.value == ""
