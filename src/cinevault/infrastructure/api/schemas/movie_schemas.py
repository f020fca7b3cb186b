"""Pydantic schemas for movie catalog endpoints."""

from datetime import datetime

from pydantic import AnyHttpUrl, BaseModel, Field, field_validator

from cinevault.domain.entities import MediaLink, MediaType, MovieData, MovieMetadata


class MovieMediaRequest(BaseModel):
    """A media link in a create or update request."""

    type: MediaType = Field(..., description="poster, backdrop or trailer")
    url: AnyHttpUrl = Field(..., description="Absolute URL of the media")
    is_main: bool = Field(False, description="Whether this is the main media of its type")

    def to_entity(self) -> MediaLink:
        return MediaLink(type=self.type, url=str(self.url), is_main=self.is_main)


class MovieMetadataRequest(BaseModel):
    """Descriptive extras in a create or update request."""

    language: str = Field("", max_length=10)
    country: str = Field("", max_length=50)
    awards: str = ""
    cast: str = ""

    def to_entity(self) -> MovieMetadata:
        return MovieMetadata(**self.model_dump())


class CreateMovieRequest(BaseModel):
    """Request body for creating a movie."""

    title: str = Field(..., min_length=1, max_length=100)
    director: str = Field(..., min_length=1, max_length=100)
    year: int = Field(..., ge=1800, le=2100)
    plot: str = ""
    genre: str = Field("", max_length=50)
    rating: float = Field(0.0, ge=0, le=10)
    duration: int = Field(0, ge=0, le=1000, description="Running time in minutes")
    media_files: list[MovieMediaRequest] = Field(default_factory=list)
    metadata: MovieMetadataRequest = Field(default_factory=MovieMetadataRequest)

    def to_entity(self) -> MovieData:
        return MovieData(
            title=self.title,
            director=self.director,
            year=self.year,
            plot=self.plot,
            genre=self.genre,
            rating=self.rating,
            duration=self.duration,
            media_files=[m.to_entity() for m in self.media_files],
            metadata=self.metadata.to_entity(),
        )


class UpdateMovieRequest(BaseModel):
    """Request body for a partial movie update.

    Omitted or empty fields leave the stored value unchanged.
    """

    title: str = Field("", max_length=100)
    director: str = Field("", max_length=100)
    year: int = Field(0, description="1800-2100, or 0 to leave unchanged")
    plot: str = ""
    genre: str = Field("", max_length=50)
    rating: float = Field(0.0, ge=0, le=10)
    duration: int = Field(0, ge=0, le=1000)
    media_files: list[MovieMediaRequest] = Field(default_factory=list)
    metadata: MovieMetadataRequest = Field(default_factory=MovieMetadataRequest)

    @field_validator("year")
    @classmethod
    def validate_year(cls, v: int) -> int:
        if v and not 1800 <= v <= 2100:
            raise ValueError("Year must be between 1800 and 2100")
        return v

    def to_entity(self) -> MovieData:
        return MovieData(
            title=self.title,
            director=self.director,
            year=self.year,
            plot=self.plot,
            genre=self.genre,
            rating=self.rating,
            duration=self.duration,
            media_files=[m.to_entity() for m in self.media_files],
            metadata=self.metadata.to_entity(),
        )


class MovieMediaResponse(BaseModel):
    """A stored media link."""

    id: int
    movie_id: int
    type: str
    url: str
    is_main: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MovieMetadataResponse(BaseModel):
    """Stored descriptive extras of a movie."""

    id: int
    movie_id: int
    language: str
    country: str
    awards: str
    cast: str

    model_config = {"from_attributes": True}


class MovieResponse(BaseModel):
    """A movie with its media links and metadata."""

    id: int
    title: str
    director: str
    year: int
    plot: str
    genre: str
    rating: float
    duration: int
    media_files: list[MovieMediaResponse] = Field(default_factory=list)
    metadata: MovieMetadataResponse | None = Field(
        None, validation_alias="movie_metadata"
    )
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True, "populate_by_name": True}
