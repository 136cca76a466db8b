"""Searchable event records and their document (wire) mapping."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from eventsearch.errors import InvalidParameter, MalformedInput


@dataclass(frozen=True)
class GeoPoint:
    """A WGS84 coordinate."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise InvalidParameter(
                f"Latitude {self.latitude} out of range", parameter="latitude"
            )
        if not -180.0 <= self.longitude <= 180.0:
            raise InvalidParameter(
                f"Longitude {self.longitude} out of range", parameter="longitude"
            )

    @classmethod
    def parse(cls, text: str) -> GeoPoint:
        """Parse ``"lat,lon"`` as typed by an operator."""
        parts = [p.strip() for p in text.split(",")]
        if len(parts) != 2:
            raise MalformedInput(
                f"Expected 'latitude,longitude', got {text!r}", parameter="location"
            )
        try:
            lat, lon = float(parts[0]), float(parts[1])
        except ValueError:
            raise MalformedInput(
                f"Expected 'latitude,longitude', got {text!r}", parameter="location"
            ) from None
        return cls(latitude=lat, longitude=lon)

    def to_geojson(self) -> dict[str, object]:
        return {"type": "Point", "coordinates": [self.longitude, self.latitude]}

    @classmethod
    def from_geojson(cls, data: dict[str, Any]) -> GeoPoint:
        lon, lat = data["coordinates"][:2]
        return cls(latitude=float(lat), longitude=float(lon))

    def scoring_value(self) -> str:
        """Value for a distance scoring parameter (longitude first)."""
        return f"{self.longitude},{self.latitude}"

    def __str__(self) -> str:
        return f"({self.latitude}, {self.longitude})"


def format_datetime(value: datetime) -> str:
    """ISO 8601 form accepted by ``Edm.DateTimeOffset`` fields."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.isoformat()


def parse_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value)


@dataclass(frozen=True)
class EventRecord:
    """A searchable event.

    Any field may be unset when the record is a projection returned by
    a query that selected only some fields.
    """

    key: str = ""
    name: str = ""
    category: str = ""
    description: str = ""
    location: str = ""
    geolocation: GeoPoint | None = None
    date: datetime | None = None
    date_added: datetime | None = None
    rating: int | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)

    def to_document(self) -> dict[str, object]:
        """Convert to the service document shape, dropping unset fields."""
        doc: dict[str, object] = {}
        for name in ("key", "name", "category", "description", "location"):
            value = getattr(self, name)
            if value:
                doc[name] = value
        if self.geolocation is not None:
            doc["geolocation"] = self.geolocation.to_geojson()
        if self.date is not None:
            doc["date"] = format_datetime(self.date)
        if self.date_added is not None:
            doc["dateadded"] = format_datetime(self.date_added)
        if self.rating is not None:
            doc["rating"] = self.rating
        if self.tags:
            doc["tags"] = list(self.tags)
        return doc

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> EventRecord:
        """Build a record from a service document; ``@search.*`` keys are ignored."""
        geo = doc.get("geolocation")
        date = doc.get("date")
        date_added = doc.get("dateadded")
        rating = doc.get("rating")
        return cls(
            key=doc.get("key") or "",
            name=doc.get("name") or "",
            category=doc.get("category") or "",
            description=doc.get("description") or "",
            location=doc.get("location") or "",
            geolocation=GeoPoint.from_geojson(geo) if geo else None,
            date=parse_datetime(date) if date else None,
            date_added=parse_datetime(date_added) if date_added else None,
            rating=int(rating) if rating is not None else None,
            tags=tuple(doc.get("tags") or ()),
        )
