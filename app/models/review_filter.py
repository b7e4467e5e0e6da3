"""Filter and sort specifications for the review management view."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.models.review import MAX_RATING, MIN_RATING

# Sentinel that disables the property and channel filters
ALL = "all"

# Only one review channel is currently known
HOSTAWAY_CHANNEL = "Hostaway"
KNOWN_CHANNELS = [HOSTAWAY_CHANNEL]

FULL_RANGE = (MIN_RATING, MAX_RATING)


class DisplayStatus(str, Enum):
    """Public-display filter on displayOnWebsite."""
    ALL = "all"
    SHOWN = "shown"
    HIDDEN = "hidden"


class SortKind(str, Enum):
    DATE = "date"
    RATING = "rating"
    CATEGORY = "category"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ReviewFilter(BaseModel):
    """Compound filter over a review collection. All fields compose by AND.

    category_ranges maps a category name to an inclusive (min, max) bound on
    the 0-10 scale. The full range (0, 10) means "no restriction".
    """
    property: str = ALL
    channel: str = ALL
    display_status: DisplayStatus = DisplayStatus.ALL
    search_text: str = ""
    category_ranges: dict[str, tuple[float, float]] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @field_validator("category_ranges", mode="after")
    @classmethod
    def order_bounds(cls, v: dict[str, tuple[float, float]]) -> dict[str, tuple[float, float]]:
        """Swap inverted bounds so min <= max."""
        return {
            name: (low, high) if low <= high else (high, low)
            for name, (low, high) in v.items()
        }

    def cache_key(self) -> str:
        """Stable string identity used for memoizing filtered views."""
        return self.model_dump_json()


class SortKey(BaseModel):
    """Tagged sort key: {kind, direction, category?}.

    category is required for SortKind.CATEGORY and ignored otherwise.
    """
    kind: SortKind = SortKind.DATE
    direction: SortDirection = SortDirection.DESC
    category: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_category(self) -> "SortKey":
        if self.kind == SortKind.CATEGORY and not self.category:
            raise ValueError("category sort requires a category name")
        return self

    @property
    def descending(self) -> bool:
        return self.direction == SortDirection.DESC

    @classmethod
    def parse(cls, value: str) -> "SortKey":
        """Parse the legacy compound form ("date-desc", "cleanliness-asc").

        Splits on the last "-" so category names containing "-" survive.
        "date" and "rating" prefixes map to their dedicated kinds; anything
        else is a category.

        Raises:
            ValueError: If the direction suffix is missing or unknown
        """
        name, sep, direction = value.rpartition("-")
        if not sep or not name:
            raise ValueError(f"Invalid sort key: {value!r}")
        try:
            parsed_direction = SortDirection(direction)
        except ValueError:
            raise ValueError(f"Invalid sort direction in {value!r}") from None

        if name == SortKind.DATE.value:
            return cls(kind=SortKind.DATE, direction=parsed_direction)
        if name == SortKind.RATING.value:
            return cls(kind=SortKind.RATING, direction=parsed_direction)
        return cls(kind=SortKind.CATEGORY, direction=parsed_direction, category=name)

    def cache_key(self) -> str:
        category = self.category if self.kind == SortKind.CATEGORY else ""
        return f"{self.kind.value}:{category}:{self.direction.value}"


DEFAULT_SORT = SortKey(kind=SortKind.DATE, direction=SortDirection.DESC)


class FilterOptions(BaseModel):
    """Values the management view offers in its filter controls."""
    properties: list[str] = Field(default_factory=list)
    channels: list[str] = Field(default_factory=lambda: list(KNOWN_CHANNELS))
    display_statuses: list[str] = Field(
        default_factory=lambda: [status.value for status in DisplayStatus]
    )
    categories: list[str] = Field(default_factory=list)
