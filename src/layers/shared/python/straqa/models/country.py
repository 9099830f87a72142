"""Country option model used by the phone number selector."""

from pydantic import BaseModel as PydanticBaseModel, ConfigDict, Field

# Regional indicator symbol for "A"; flags are two of these side by side
_REGIONAL_INDICATOR_A = 0x1F1E6


class CountryOption(PydanticBaseModel):
    """A selectable country: label, ISO code and calling code."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(..., min_length=2, max_length=2, description="ISO 3166-1 alpha-2 code")
    label: str = Field(..., description="Display name")
    dial_code: int = Field(..., gt=0, description="Country calling code")

    @property
    def flag(self) -> str:
        """Emoji flag for the country."""
        return "".join(chr(_REGIONAL_INDICATOR_A + ord(c) - ord("A")) for c in self.code.upper())

    @property
    def dial_prefix(self) -> str:
        """Calling code as shown next to the country, e.g. ``+234``."""
        return f"+{self.dial_code}"

    def matches(self, query: str) -> bool:
        """Whether the option matches a search query (name, code or dial code)."""
        query = query.strip().lower()
        if not query:
            return True
        if query.startswith("+"):
            return self.dial_prefix.startswith(query)
        return (
            query in self.label.lower()
            or query == self.code.lower()
            or str(self.dial_code).startswith(query)
        )
