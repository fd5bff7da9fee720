"""Entity store: mutation commands over the live diagram state."""

import dataclasses
import logging
from collections.abc import Iterable
from dataclasses import dataclass

import networkx as nx

from genogram.config import settings
from genogram.geometry import nearest_edge_index, translate
from genogram.graph import (
    build_focus_graph,
    create_relationship_lookup,
    get_connected_node_ids,
    get_highlighted_relationship_ids,
)
from genogram.history import History
from genogram.households import recompute_membership, update_households_with_members
from genogram.models import (
    DiagramState,
    Household,
    NodeRef,
    Person,
    Point,
    Relationship,
    TextBox,
)
from genogram.relationship_types import RelationshipType

logger = logging.getLogger(__name__)


class GenogramError(Exception):
    """Base class for store contract violations."""


class EntityNotFoundError(GenogramError, KeyError):
    def __init__(self, kind: str, entity_id: str):
        super().__init__(f"{kind} {entity_id!r} not found")
        self.kind = kind
        self.entity_id = entity_id

    def __str__(self) -> str:
        return self.args[0]


class DuplicateIdError(GenogramError, ValueError):
    pass


@dataclass
class FocusView:
    node_ids: set[str]
    relationship_ids: set[str]


def _field_names(cls) -> set[str]:
    return {f.name for f in dataclasses.fields(cls)}


def _apply_changes(entity, changes: dict, protected: Iterable[str] = ("id",)) -> None:
    allowed = _field_names(type(entity))
    for name in changes:
        if name in protected:
            raise ValueError(f"{name!r} cannot be changed on {type(entity).__name__}")
        if name not in allowed:
            raise TypeError(f"{type(entity).__name__} has no field {name!r}")
    for name, value in changes.items():
        setattr(entity, name, value)


class DiagramStore:
    """
    Owns the live people, relationships, households and text boxes.

    Commands mutate the live state directly. Nothing is written to history until the
    caller invokes `checkpoint()`, normally once per user edit. Household member lists
    are refreshed whenever a command changes a person position or a boundary.
    """

    def __init__(self, state: DiagramState | None = None, history_limit: int | None = None):
        self.state = state.copy() if state is not None else DiagramState()
        self.state.households = update_households_with_members(
            self.state.households, self.state.people
        )
        self.history: History[DiagramState] = History(self.state, limit=history_limit)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def _find(self, items: list, entity_id: str, kind: str):
        for item in items:
            if item.id == entity_id:
                return item
        raise EntityNotFoundError(kind, entity_id)

    def get_person(self, person_id: str) -> Person:
        return self._find(self.state.people, person_id, "Person")

    def get_relationship(self, relationship_id: str) -> Relationship:
        return self._find(self.state.relationships, relationship_id, "Relationship")

    def get_household(self, household_id: str) -> Household:
        return self._find(self.state.households, household_id, "Household")

    def get_text_box(self, text_box_id: str) -> TextBox:
        return self._find(self.state.text_boxes, text_box_id, "TextBox")

    def _check_node_id_free(self, node_id: str) -> None:
        # People and relationships share one id space for endpoint resolution.
        if node_id in self.state.person_ids() or node_id in self.state.relationship_ids():
            raise DuplicateIdError(f"Id {node_id!r} is already used by a person or relationship")

    # ------------------------------------------------------------------
    # People
    # ------------------------------------------------------------------

    def add_person(self, person: Person) -> Person:
        self._check_node_id_free(person.id)
        self.state.people.append(person)
        self._refresh_all_households()
        return person

    def update_person(self, person_id: str, **changes) -> Person:
        person = self.get_person(person_id)
        _apply_changes(person, changes)
        if "x" in changes or "y" in changes:
            self._refresh_all_households()
        return person

    def move_person(self, person_id: str, x: float, y: float) -> Person:
        return self.update_person(person_id, x=x, y=y)

    def delete_person(self, person_id: str) -> list[str]:
        """
        Remove a person and every relationship that references them.

        Child edges hanging from a union removed this way are removed too.

        Returns:
            Ids of the relationships deleted along with the person
        """
        person = self.get_person(person_id)
        ref = NodeRef.person(person_id)

        removed = {r.id for r in self.state.relationships if ref in (r.source, r.target)}
        removed_refs = {NodeRef.relationship(rel_id) for rel_id in removed}
        removed.update(
            r.id
            for r in self.state.relationships
            if r.is_child and r.source in removed_refs
        )

        self.state.people.remove(person)
        self.state.relationships = [r for r in self.state.relationships if r.id not in removed]
        if removed:
            logger.info(
                "Deleted person %s and %d relationship(s): %s",
                person_id,
                len(removed),
                sorted(removed),
            )
        self._refresh_all_households()
        return sorted(removed)

    # ------------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------------

    def add_relationship(self, relationship: Relationship) -> Relationship:
        self._check_node_id_free(relationship.id)
        self.state.relationships.append(relationship)
        return relationship

    def connect(
        self,
        relationship_id: str,
        rel_type: RelationshipType | str,
        source: NodeRef,
        target: NodeRef,
    ) -> Relationship:
        return self.add_relationship(Relationship(relationship_id, rel_type, source, target))

    def add_child(self, relationship_id: str, union_id: str, child_id: str) -> Relationship:
        """Hang `child_id` from the union relationship `union_id`."""
        union = self.get_relationship(union_id)
        if not union.is_union_capable:
            raise ValueError(
                f"Relationship {union_id!r} of type {union.type.value!r} cannot have children"
            )
        return self.connect(
            relationship_id,
            RelationshipType.CHILD,
            NodeRef.relationship(union_id),
            NodeRef.person(child_id),
        )

    def update_relationship(self, relationship_id: str, **changes) -> Relationship:
        relationship = self.get_relationship(relationship_id)
        if "type" in changes:
            changes["type"] = RelationshipType.parse(changes["type"])
        _apply_changes(relationship, changes)
        return relationship

    def delete_relationship(self, relationship_id: str, cascade: bool | None = None) -> list[str]:
        """
        Remove a relationship.

        With `cascade` (default `settings.cascade_child_edges`) the child edges that hang
        from it are removed as well; otherwise they are left as orphans, which the
        connectivity engine skips.

        Returns:
            Ids of every relationship removed
        """
        relationship = self.get_relationship(relationship_id)
        if cascade is None:
            cascade = settings.cascade_child_edges

        ref = NodeRef.relationship(relationship_id)
        children = [r.id for r in self.state.relationships if r.is_child and r.source == ref]

        removed = {relationship_id}
        if children and cascade:
            logger.info(
                "Deleting relationship %s also removes %d child edge(s): %s",
                relationship_id,
                len(children),
                children,
            )
            removed.update(children)
        elif children:
            logger.info(
                "Deleting relationship %s leaves %d orphaned child edge(s): %s",
                relationship_id,
                len(children),
                children,
            )

        self.state.relationships = [
            r for r in self.state.relationships if r.id not in removed
        ]
        return sorted(removed)

    def orphaned_child_relationships(self) -> list[Relationship]:
        """Child edges whose union no longer exists."""
        relationship_ids = self.state.relationship_ids()
        return [
            r
            for r in self.state.relationships
            if r.is_child and r.source.is_relationship and r.source.id not in relationship_ids
        ]

    # ------------------------------------------------------------------
    # Households
    # ------------------------------------------------------------------

    def _refresh_household(self, household: Household) -> None:
        household.members = recompute_membership(household, self.state.people)

    def _refresh_all_households(self) -> None:
        for household in self.state.households:
            self._refresh_household(household)

    def add_household(self, household: Household) -> Household:
        if any(h.id == household.id for h in self.state.households):
            raise DuplicateIdError(f"Household {household.id!r} already exists")
        self.state.households.append(household)
        self._refresh_household(household)
        return household

    def update_household(self, household_id: str, **changes) -> Household:
        household = self.get_household(household_id)
        _apply_changes(household, changes, protected=("id", "members"))
        if "points" in changes:
            household.points = list(household.points)
            self._refresh_household(household)
        return household

    def move_household(self, household_id: str, dx: float, dy: float) -> Household:
        household = self.get_household(household_id)
        household.points = translate(household.points, dx, dy)
        self._refresh_household(household)
        return household

    def add_household_point(
        self, household_id: str, point: Point, index: int | None = None
    ) -> Household:
        """
        Insert a boundary point after `index`, or on the nearest edge when `index` is None.
        """
        household = self.get_household(household_id)
        if index is None:
            index = nearest_edge_index(household.points, point)
        household.points.insert(index + 1, point)
        self._refresh_household(household)
        return household

    def move_household_point(self, household_id: str, point_index: int, point: Point) -> Household:
        household = self.get_household(household_id)
        household.points[point_index] = point
        self._refresh_household(household)
        return household

    def remove_household_point(self, household_id: str, point_index: int) -> Household:
        household = self.get_household(household_id)
        if len(household.points) <= 3:
            raise ValueError(f"Household {household_id!r} needs at least 3 boundary points")
        del household.points[point_index]
        self._refresh_household(household)
        return household

    def delete_household(self, household_id: str) -> None:
        self.state.households.remove(self.get_household(household_id))

    # ------------------------------------------------------------------
    # Text boxes
    # ------------------------------------------------------------------

    def add_text_box(self, text_box: TextBox) -> TextBox:
        if any(t.id == text_box.id for t in self.state.text_boxes):
            raise DuplicateIdError(f"TextBox {text_box.id!r} already exists")
        self.state.text_boxes.append(text_box)
        return text_box

    def update_text_box(self, text_box_id: str, **changes) -> TextBox:
        text_box = self.get_text_box(text_box_id)
        _apply_changes(text_box, changes)
        return text_box

    def delete_text_box(self, text_box_id: str) -> None:
        self.state.text_boxes.remove(self.get_text_box(text_box_id))

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def focus_graph(self) -> nx.Graph:
        return build_focus_graph(self.state.relationships, self.state.person_ids())

    def connected_node_ids(self, node_id: str) -> set[str]:
        return get_connected_node_ids(node_id, self.focus_graph())

    def highlighted_relationship_ids(
        self, visible_ids: set[str] | None, focused_id: str | None = None
    ) -> set[str]:
        lookup = create_relationship_lookup(self.state.relationships)
        return get_highlighted_relationship_ids(
            self.state.relationships, visible_ids, lookup, focused_id
        )

    def focus(self, node_id: str) -> FocusView:
        """The focal node with its direct neighbours, and the relationships through it."""
        node_ids = {node_id} | self.connected_node_ids(node_id)
        return FocusView(
            node_ids=node_ids,
            relationship_ids=self.highlighted_relationship_ids(node_ids, focused_id=node_id),
        )

    def network_view(self) -> FocusView:
        """People flagged as network members and every relationship touching one of them."""
        node_ids = {p.id for p in self.state.people if p.network_member}
        return FocusView(
            node_ids=node_ids,
            relationship_ids=self.highlighted_relationship_ids(node_ids),
        )

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def checkpoint(self) -> None:
        """Record the current state as one undoable step."""
        self.history.save(self.state)

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def undo(self) -> bool:
        """
        Restore the previous snapshot, dropping edits made since the last checkpoint.

        At the oldest snapshot this returns False and leaves the live state alone,
        unsaved edits included.
        """
        if not self.history.can_undo:
            return False
        self.state = self.history.undo()
        return True

    def redo(self) -> bool:
        """Restore the next snapshot. Returns False at the newest snapshot."""
        if not self.history.can_redo:
            return False
        self.state = self.history.redo()
        return True

    def load(self, state: DiagramState) -> None:
        """Replace the live state and restart history from it."""
        self.state = state.copy()
        self._refresh_all_households()
        self.history.reset(self.state)
