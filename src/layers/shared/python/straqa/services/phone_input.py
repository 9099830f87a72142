"""Phone number input: a searchable country selector next to a text field.

The widget only ever exposes a complete E.164 number or an empty string.
Empty or incomplete input reads as empty, so callers cannot use the value for
intermediate feedback; the required-field check is what reports it.
"""

from enum import Enum
from typing import Callable

import phonenumbers
import structlog
from phonenumbers import NumberParseException, PhoneNumberFormat, ValidationResult

from straqa.models.country import CountryOption
from straqa.models.lead_form import DEFAULT_COUNTRY
from straqa.services.countries import CountryTable, get_country_table

logger = structlog.get_logger()


class SelectorState(str, Enum):
    """Country selector states."""

    COLLAPSED = "collapsed"
    EXPANDED = "expanded"


def normalize_phone(text: str, country: str) -> str:
    """Normalize typed text to E.164 for a country.

    Text starting with ``+`` is read as an international number regardless
    of the country.

    Args:
        text: Number as typed.
        country: ISO code of the selected country.

    Returns:
        E.164 number, or ``""`` when the text is not a complete-length number.
        Numbers that only dial locally (no area code) count as incomplete.
    """
    text = (text or "").strip()
    if not text:
        return ""

    region = None if text.startswith("+") else country.upper()
    try:
        number = phonenumbers.parse(text, region)
    except NumberParseException:
        return ""

    if phonenumbers.is_possible_number_with_reason(number) != ValidationResult.IS_POSSIBLE:
        return ""
    return phonenumbers.format_number(number, PhoneNumberFormat.E164)


class PhoneInput:
    """State of the phone number widget.

    Starts collapsed with the default country selected. ``open`` expands the
    searchable list, ``select`` commits a country and collapses it again, and
    ``type`` updates the value live.
    """

    def __init__(
        self,
        default_country: str = DEFAULT_COUNTRY,
        countries: CountryTable | None = None,
        on_change: Callable[[str], None] | None = None,
    ):
        self._countries = countries or get_country_table()
        country = self._countries.get(default_country)
        if country is None:
            raise ValueError(f"Unknown country '{default_country}'")

        self.country: CountryOption = country
        self.state = SelectorState.COLLAPSED
        self.query = ""
        self.text = ""
        self.value = ""
        self._on_change = on_change

    @property
    def is_expanded(self) -> bool:
        return self.state == SelectorState.EXPANDED

    def open(self) -> list[CountryOption]:
        """Expand the selector, showing the full list."""
        self.state = SelectorState.EXPANDED
        self.query = ""
        return self.options

    def close(self) -> None:
        """Collapse the selector without changing the country."""
        self.state = SelectorState.COLLAPSED
        self.query = ""

    @property
    def options(self) -> list[CountryOption]:
        """Options visible in the expanded list for the current query."""
        if not self.is_expanded:
            return []
        return self._countries.search(self.query)

    def search(self, query: str) -> list[CountryOption]:
        """Filter the expanded list."""
        if not self.is_expanded:
            self.open()
        self.query = query
        return self.options

    def select(self, code: str) -> CountryOption:
        """Commit a country and collapse the selector.

        Raises:
            ValueError: If the code is not in the country table.
        """
        country = self._countries.get(code)
        if country is None:
            raise ValueError(f"Unknown country '{code}'")

        self.country = country
        self.close()
        self._update_value()
        return country

    def type(self, text: str) -> str:
        """Replace the typed text and return the normalized value."""
        self.text = text
        self._update_value()
        return self.value

    def _update_value(self) -> None:
        value = normalize_phone(self.text, self.country.code)
        if value != self.value:
            self.value = value
            if self._on_change:
                self._on_change(value)
