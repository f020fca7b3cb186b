"""Movie catalog entities.

Plain dataclasses describing the catalog data that flows between the HTTP
layer and the movie service. Persistence lives in the SQLAlchemy models.
"""

from dataclasses import dataclass, field
from enum import Enum


class MediaType(str, Enum):
    """Kinds of media link a movie can carry."""

    POSTER = "poster"
    BACKDROP = "backdrop"
    TRAILER = "trailer"

    @classmethod
    def parse(cls, value: str) -> "MediaType":
        """Parse a media type, raising ValueError for unknown values."""
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ValueError(f"Invalid media type '{value}'. Must be one of: {allowed}") from None


@dataclass
class MediaLink:
    """A poster, backdrop or trailer URL attached to a movie.

    Attributes:
        type: Media kind.
        url: Absolute URL of the media.
        is_main: Whether this is the primary media of its kind.
    """

    type: MediaType
    url: str
    is_main: bool = False

    def __post_init__(self) -> None:
        self.type = MediaType.parse(self.type)
        if not self.url:
            raise ValueError("Media URL is required")


@dataclass
class MovieMetadata:
    """Descriptive extras stored alongside a movie (one row per movie)."""

    language: str = ""
    country: str = ""
    awards: str = ""
    cast: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.language or self.country or self.awards or self.cast)


@dataclass
class MovieData:
    """Field values for creating or updating a movie.

    On update, falsy scalar fields mean "leave unchanged", an empty
    ``media_files`` keeps the existing links and empty metadata keeps the
    existing metadata row.
    """

    title: str = ""
    director: str = ""
    year: int = 0
    plot: str = ""
    genre: str = ""
    rating: float = 0.0
    duration: int = 0
    media_files: list[MediaLink] = field(default_factory=list)
    metadata: MovieMetadata = field(default_factory=MovieMetadata)

    SCALAR_FIELDS = ("title", "director", "year", "plot", "genre", "rating", "duration")

    def changed_fields(self) -> dict[str, object]:
        """Return the scalar fields that carry a value."""
        return {
            name: getattr(self, name)
            for name in self.SCALAR_FIELDS
            if getattr(self, name)
        }
