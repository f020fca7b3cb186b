"""SQLAlchemy models for the movie catalog.

A movie owns its media links and at most one metadata row. Movies are
soft-deleted: ``deleted_at`` is set and the row stays.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cinevault.infrastructure.persistence.database import Base


class MovieModel(Base):
    """SQLAlchemy model for the movies table.

    Attributes:
        id: Primary key; also the owner namespace for uploaded files.
        title: Movie title.
        director: Director name.
        year: Release year (1800-2100).
        plot: Free-text synopsis.
        genre: Genre label.
        rating: Score between 0 and 10.
        duration: Running time in minutes (0-1000).
        deleted_at: Soft-delete timestamp; NULL while the movie is live.
    """

    __tablename__ = "movies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    director: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    plot: Mapped[str] = mapped_column(Text, nullable=False, default="")
    genre: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    duration: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, comment="Running time in minutes"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True, index=True)

    media_files: Mapped[list["MovieMediaModel"]] = relationship(
        "MovieMediaModel",
        back_populates="movie",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="MovieMediaModel.id",
    )
    movie_metadata: Mapped[Optional["MovieMetadataModel"]] = relationship(
        "MovieMetadataModel",
        back_populates="movie",
        cascade="all, delete-orphan",
        uselist=False,
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("year >= 1800 AND year <= 2100", name="ck_movies_year"),
        CheckConstraint("rating >= 0 AND rating <= 10", name="ck_movies_rating"),
        CheckConstraint("duration >= 0 AND duration <= 1000", name="ck_movies_duration"),
    )

    def __repr__(self) -> str:
        return f"<MovieModel(id={self.id}, title={self.title})>"


class MovieMediaModel(Base):
    """A link to externally hosted media (poster, backdrop or trailer)."""

    __tablename__ = "movie_media"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    movie_id: Mapped[int] = mapped_column(
        ForeignKey("movies.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    is_main: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    movie: Mapped[MovieModel] = relationship("MovieModel", back_populates="media_files")

    __table_args__ = (
        CheckConstraint(
            "type IN ('poster', 'backdrop', 'trailer')", name="ck_movie_media_type"
        ),
    )


class MovieMetadataModel(Base):
    """Descriptive metadata for a movie; at most one row per movie."""

    __tablename__ = "movie_metadata"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    movie_id: Mapped[int] = mapped_column(
        ForeignKey("movies.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    language: Mapped[str] = mapped_column(String(10), nullable=False, default="")
    country: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    awards: Mapped[str] = mapped_column(Text, nullable=False, default="")
    cast: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    movie: Mapped[MovieModel] = relationship("MovieModel", back_populates="movie_metadata")
