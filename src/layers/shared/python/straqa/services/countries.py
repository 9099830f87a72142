"""Immutable country lookup table for the phone number selector."""

from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, Mapping

import phonenumbers
import structlog

from straqa.models.country import CountryOption
from straqa.services.country_data import COUNTRY_LABELS

logger = structlog.get_logger()


class CountryTable:
    """Read-only set of country options, sorted by label."""

    def __init__(self, options: tuple[CountryOption, ...]):
        self._options = tuple(sorted(options, key=lambda option: option.label))
        self._by_code: Mapping[str, CountryOption] = MappingProxyType(
            {option.code: option for option in self._options}
        )

    def __len__(self) -> int:
        return len(self._options)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.upper() in self._by_code

    @property
    def options(self) -> tuple[CountryOption, ...]:
        """All options in display order."""
        return self._options

    def get(self, code: str) -> CountryOption | None:
        """Get a country by ISO code (case-insensitive)."""
        return self._by_code.get(code.upper())

    def search(self, query: str = "") -> list[CountryOption]:
        """Filter options by name, ISO code or dial code."""
        return [option for option in self._options if option.matches(query)]


def build_country_table(
    regions: Iterable[str] = phonenumbers.SUPPORTED_REGIONS,
    labels: Mapping[str, str] = COUNTRY_LABELS,
) -> CountryTable:
    """Build a table for the given ISO region codes.

    Defaults to every region in the phone number metadata, so each selectable
    country can be parsed. Regions without a calling code are left out; a
    region without a display name is labelled with its code.
    """
    options = []
    for code in sorted(set(regions)):
        dial_code = phonenumbers.country_code_for_region(code)
        if not dial_code:
            logger.debug("Skipping country without calling code", country=code)
            continue

        label = labels.get(code)
        if label is None:
            logger.warning("Country has no display name", country=code)
            label = code
        options.append(CountryOption(code=code, label=label, dial_code=dial_code))
    return CountryTable(tuple(options))


@lru_cache(maxsize=1)
def get_country_table() -> CountryTable:
    """Get the process-wide country table, built on first use."""
    table = build_country_table()
    logger.info("Loaded country table", countries=len(table))
    return table
