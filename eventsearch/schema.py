"""Index schema for searchable events.

The flag matrix decides which query operations are legal against each
field: a field must be facetable to appear in a facet request,
searchable to be matched by free text, and so on.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from eventsearch.errors import UnknownField

if TYPE_CHECKING:
    from eventsearch.scoring import ScoringProfile


class DataType(StrEnum):
    """Field data types, valued by their wire names."""

    STRING = "Edm.String"
    INT32 = "Edm.Int32"
    DATE = "Edm.DateTimeOffset"
    GEO_POINT = "Edm.GeographyPoint"
    STRING_COLLECTION = "Collection(Edm.String)"


@dataclass(frozen=True)
class Field:
    """A single index field and its indexing attributes."""

    name: str
    type: DataType
    key: bool = False
    searchable: bool = False
    filterable: bool = False
    sortable: bool = False
    facetable: bool = False
    retrievable: bool = True

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "type": self.type.value,
            "key": self.key,
            "searchable": self.searchable,
            "filterable": self.filterable,
            "sortable": self.sortable,
            "facetable": self.facetable,
            "retrievable": self.retrievable,
        }


@dataclass(frozen=True)
class Suggester:
    """Auto-completion configuration over a set of source fields."""

    name: str
    source_fields: tuple[str, ...]
    search_mode: str = "analyzingInfixMatching"

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "searchMode": self.search_mode,
            "sourceFields": list(self.source_fields),
        }


DEFAULT_SUGGESTER = Suggester(name="sg", source_fields=("name",))


def build_schema() -> list[Field]:
    """Return the event fields in declaration order."""
    return [
        Field(
            "key",
            DataType.STRING,
            key=True,
            searchable=True,
            filterable=True,
            sortable=True,
            facetable=True,
        ),
        Field("name", DataType.STRING, searchable=True, sortable=True, facetable=True),
        Field(
            "category",
            DataType.STRING,
            searchable=True,
            filterable=True,
            sortable=True,
            facetable=True,
        ),
        Field(
            "description",
            DataType.STRING,
            searchable=True,
            filterable=True,
            sortable=True,
            facetable=True,
        ),
        Field(
            "location",
            DataType.STRING,
            searchable=True,
            filterable=True,
            sortable=True,
            facetable=True,
        ),
        Field(
            "date", DataType.DATE, filterable=True, sortable=True, facetable=True
        ),
        Field(
            "tags",
            DataType.STRING_COLLECTION,
            searchable=True,
            filterable=True,
            facetable=True,
        ),
        Field("geolocation", DataType.GEO_POINT, filterable=True, sortable=True),
        Field(
            "dateadded", DataType.DATE, filterable=True, sortable=True, facetable=True
        ),
        Field(
            "rating", DataType.INT32, filterable=True, sortable=True, facetable=True
        ),
    ]


def get_field(name: str) -> Field:
    """Look up a schema field by name.

    Raises:
        UnknownField: If *name* is not a schema field.
    """
    for f in build_schema():
        if f.name == name:
            return f
    raise UnknownField(f"Unknown field '{name}'", parameter=name)


def build_index_definition(
    name: str,
    profiles: Iterable[ScoringProfile] = (),
    *,
    suggester: Suggester = DEFAULT_SUGGESTER,
) -> dict[str, object]:
    """Build the full index payload sent to the service."""
    definition: dict[str, object] = {
        "name": name,
        "fields": [f.to_dict() for f in build_schema()],
        "suggesters": [suggester.to_dict()],
    }
    profile_list = [p.to_dict() for p in profiles]
    if profile_list:
        definition["scoringProfiles"] = profile_list
    return definition
