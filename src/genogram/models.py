"""Data classes for genogram entities and the combined diagram state."""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from genogram.relationship_types import RelationshipType


class NodeKind(str, Enum):
    PERSON = "person"
    RELATIONSHIP = "relationship"


@dataclass(frozen=True)
class NodeRef:
    """Tagged reference to either a Person or a Relationship."""

    kind: NodeKind
    id: str

    @classmethod
    def person(cls, node_id: str) -> "NodeRef":
        return cls(NodeKind.PERSON, node_id)

    @classmethod
    def relationship(cls, node_id: str) -> "NodeRef":
        return cls(NodeKind.RELATIONSHIP, node_id)

    @property
    def is_person(self) -> bool:
        return self.kind is NodeKind.PERSON

    @property
    def is_relationship(self) -> bool:
        return self.kind is NodeKind.RELATIONSHIP

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "id": self.id}


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass
class Person:
    id: str
    name: str = ""
    gender: str | None = None
    birth_date: str | None = None  # ISO format YYYY-MM-DD or None
    death_date: str | None = None
    x: float = 0.0
    y: float = 0.0
    is_deceased: bool = False
    special_status: str | None = None
    network_member: bool = False
    tags: list[str] = field(default_factory=list)
    notes: str = ""

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)


@dataclass
class Relationship:
    id: str
    type: RelationshipType
    source: NodeRef  # "from"
    target: NodeRef  # "to"
    is_active: bool = True
    notes: str = ""
    attributes: list[str] = field(default_factory=list)

    def __post_init__(self):
        self.type = RelationshipType.parse(self.type)

    @property
    def is_self_referential(self) -> bool:
        return self.source == self.target

    @property
    def is_union_capable(self) -> bool:
        return self.type.is_union_capable

    @property
    def is_child(self) -> bool:
        return self.type.is_child


@dataclass
class Household:
    id: str
    points: list[Point] = field(default_factory=list)
    label: str = ""
    color: str = "#6366f1"
    curved: bool = True
    smoothing: float = 0.5
    # Derived from geometry by genogram.households; never edit directly.
    members: list[str] = field(default_factory=list)

    @property
    def is_degenerate(self) -> bool:
        return len(self.points) < 3


@dataclass
class TextBox:
    id: str
    x: float = 0.0
    y: float = 0.0
    width: float = 200.0
    height: float = 100.0
    text: str = ""


COLLECTION_KEYS = ("people", "relationships", "households", "textBoxes")


@dataclass
class DiagramState:
    """The four collections that make up one undoable unit of state."""

    people: list[Person] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)
    households: list[Household] = field(default_factory=list)
    text_boxes: list[TextBox] = field(default_factory=list)

    def copy(self) -> "DiagramState":
        return copy.deepcopy(self)

    def person_ids(self) -> set[str]:
        return {p.id for p in self.people}

    def relationship_ids(self) -> set[str]:
        return {r.id for r in self.relationships}

    def to_dict(self) -> dict:
        """Plain, JSON-compatible representation of the state."""
        return {
            "people": [_person_to_dict(p) for p in self.people],
            "relationships": [_relationship_to_dict(r) for r in self.relationships],
            "households": [_household_to_dict(h) for h in self.households],
            "textBoxes": [_text_box_to_dict(t) for t in self.text_boxes],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DiagramState":
        """
        Build a state from its plain representation.

        Missing collections default to empty. A collection that is present but not a
        list raises TypeError. Untagged string endpoints are classified as relationship
        references when they name a relationship in the same payload and as person
        references when they name a person. An unknown `from` of a child edge is taken
        to be a deleted union, so the edge loads as an orphan. Any other unknown id is a
        dangling person reference.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Expected a dict of collections, got {type(data).__name__}")

        collections = {}
        for key in COLLECTION_KEYS:
            value = data.get(key, [])
            if value is None:
                value = []
            if not isinstance(value, list):
                raise TypeError(f"Collection {key!r} must be a list, got {type(value).__name__}")
            collections[key] = value

        person_ids = {p["id"] for p in collections["people"]}
        relationship_ids = {r["id"] for r in collections["relationships"]}

        return cls(
            people=[_person_from_dict(p) for p in collections["people"]],
            relationships=[
                _relationship_from_dict(r, person_ids, relationship_ids)
                for r in collections["relationships"]
            ],
            households=[_household_from_dict(h) for h in collections["households"]],
            text_boxes=[_text_box_from_dict(t) for t in collections["textBoxes"]],
        )


# ============================================================================
# Plain-value conversion
# ============================================================================


def _person_to_dict(p: Person) -> dict:
    return {
        "id": p.id,
        "name": p.name,
        "gender": p.gender,
        "birthDate": p.birth_date,
        "deathDate": p.death_date,
        "x": p.x,
        "y": p.y,
        "isDeceased": p.is_deceased,
        "specialStatus": p.special_status,
        "networkMember": p.network_member,
        "tags": list(p.tags),
        "notes": p.notes,
    }


def _person_from_dict(d: dict) -> Person:
    return Person(
        id=d["id"],
        name=d.get("name", ""),
        gender=d.get("gender"),
        birth_date=d.get("birthDate"),
        death_date=d.get("deathDate"),
        x=float(d.get("x", 0.0)),
        y=float(d.get("y", 0.0)),
        is_deceased=bool(d.get("isDeceased", False)),
        special_status=d.get("specialStatus"),
        network_member=bool(d.get("networkMember", False)),
        tags=list(d.get("tags") or []),
        notes=d.get("notes") or "",
    )


def _relationship_to_dict(r: Relationship) -> dict:
    return {
        "id": r.id,
        "type": r.type.value,
        "from": r.source.to_dict(),
        "to": r.target.to_dict(),
        "isActive": r.is_active,
        "notes": r.notes,
        "attributes": list(r.attributes),
    }


def _ref_from_value(
    value: Any, person_ids: set[str], relationship_ids: set[str], union_side: bool = False
) -> NodeRef:
    if isinstance(value, dict):
        return NodeRef(NodeKind(value["kind"]), value["id"])
    if value in relationship_ids:
        return NodeRef.relationship(value)
    if value in person_ids:
        return NodeRef.person(value)
    if union_side:
        return NodeRef.relationship(value)
    return NodeRef.person(value)


def _relationship_from_dict(
    d: dict, person_ids: set[str], relationship_ids: set[str]
) -> Relationship:
    rel_type = RelationshipType.parse(d["type"])
    return Relationship(
        id=d["id"],
        type=rel_type,
        source=_ref_from_value(d["from"], person_ids, relationship_ids, rel_type.is_child),
        target=_ref_from_value(d["to"], person_ids, relationship_ids),
        is_active=bool(d.get("isActive", True)),
        notes=d.get("notes") or "",
        attributes=list(d.get("attributes") or []),
    )


def _household_to_dict(h: Household) -> dict:
    return {
        "id": h.id,
        "points": [p.to_dict() for p in h.points],
        "label": h.label,
        "color": h.color,
        "curved": h.curved,
        "smoothing": h.smoothing,
        "members": list(h.members),
    }


def _household_from_dict(d: dict) -> Household:
    return Household(
        id=d["id"],
        points=[Point(float(p["x"]), float(p["y"])) for p in d.get("points") or []],
        label=d.get("label") or d.get("name") or "",
        color=d.get("color", "#6366f1"),
        curved=bool(d.get("curved", True)),
        smoothing=float(d.get("smoothing", 0.5)),
        members=list(d.get("members") or []),
    )


def _text_box_to_dict(t: TextBox) -> dict:
    return {
        "id": t.id,
        "x": t.x,
        "y": t.y,
        "width": t.width,
        "height": t.height,
        "text": t.text,
    }


def _text_box_from_dict(d: dict) -> TextBox:
    return TextBox(
        id=d["id"],
        x=float(d.get("x", 0.0)),
        y=float(d.get("y", 0.0)),
        width=float(d.get("width", 200.0)),
        height=float(d.get("height", 100.0)),
        text=d.get("text") or "",
    )
