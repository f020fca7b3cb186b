"""SQLAlchemy model for the movie_files table.

Each row records one upload. The bytes live in the content-addressed file
store under ``file_path``; identical uploads for the same movie share that
path, so a path may be referenced by more than one row.
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from cinevault.infrastructure.persistence.database import Base


class MovieFileModel(Base):
    """SQLAlchemy model for uploaded movie files.

    Attributes:
        id: Primary key.
        movie_id: Owning movie.
        file_name: Original display name supplied by the uploader.
        file_size: Size in bytes.
        content_type: Declared MIME type.
        file_path: Storage key relative to the storage root.
        file_hash: Hex SHA-256 of the content.
    """

    __tablename__ = "movie_files"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    movie_id: Mapped[int] = mapped_column(
        ForeignKey("movies.id", ondelete="CASCADE"), nullable=False, index=True
    )
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False)
    file_path: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    file_hash: Mapped[str] = mapped_column(String(64), nullable=False)
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

    def __repr__(self) -> str:
        return f"<MovieFileModel(id={self.id}, movie_id={self.movie_id}, file_name={self.file_name})>"
