"""
Filter criteria for the record browser.

FilterCriteria is an immutable value: editing a filter produces a new
object, and the session only sees criteria when they are applied. The
camelCase aliases match the keys a saved filter file uses, so criteria
round-trip through JSON unchanged.

INVARIANTS:
- A non-empty `codes` list overrides every other field
- `none_tag` wins over `tag` when both are set
- Empty numeric bounds mean "no bound", never 0
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def split_terms(text: str) -> list[str]:
    """
    Split a comma-separated filter value into match terms.

    Terms are trimmed and lower-cased; empty terms are dropped.

    >>> split_terms(" Naruto, ,One Piece ")
    ['naruto', 'one piece']
    """
    return [term for term in (part.strip().lower() for part in text.split(",")) if term]


class FilterCriteria(BaseModel):
    """The full set of include/exclude predicates applied to a dataset."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="forbid",
    )

    # Exact code allowlist (highest priority)
    codes: str = ""

    # Substring include/exclude lists (comma-separated, any term matches)
    series: str = ""
    blacklist_series: str = ""
    blacklist_character: str = ""
    blacklist_tag: str = ""

    # Inclusive numeric bounds
    number_from: int | None = None
    number_to: int | None = None
    wishlists_from: int | None = None
    wishlists_to: int | None = None

    # Allowed edition values (empty = any edition)
    editions: frozenset[str] = Field(default_factory=frozenset)

    # "Must be present" predicates
    morphed: bool = False
    trimmed: bool = False
    frame: bool = False
    has_dye_name: bool = False

    # Tag substring match, or "must have no tag"
    tag: str = ""
    none_tag: bool = False

    # "Must be absent" predicates
    exclude_frame: bool = False
    exclude_morphed: bool = False
    exclude_trimmed: bool = False
    exclude_dye_name: bool = False

    @field_validator("number_from", "number_to", "wishlists_from", "wishlists_to", mode="before")
    @classmethod
    def _blank_bound_is_none(cls, value: Any) -> Any:
        """Form inputs send "" for an untouched bound."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("editions", mode="before")
    @classmethod
    def _editions_from_any_iterable(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            return frozenset(part.strip() for part in value.split(",") if part.strip())
        return value

    @property
    def code_keys(self) -> list[str]:
        """Search keys from `codes`, in input order, duplicates collapsed."""
        return list(dict.fromkeys(split_terms(self.codes)))

    @property
    def is_code_search(self) -> bool:
        """True when the code allowlist overrides all other predicates."""
        return bool(self.code_keys)

    @property
    def is_empty(self) -> bool:
        """True when no predicate is active."""
        return self == FilterCriteria()
