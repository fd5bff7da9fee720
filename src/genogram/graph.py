"""NetworkX graph building and focus-mode connectivity queries."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

import networkx as nx

from genogram.models import DiagramState, NodeRef, Relationship

logger = logging.getLogger(__name__)


def create_relationship_lookup(relationships: Iterable[Relationship]) -> dict[str, Relationship]:
    """Index relationships by id so union references resolve in O(1)."""
    return {rel.id: rel for rel in relationships}


def _resolve_ref(
    ref: NodeRef,
    lookup: dict[str, Relationship],
    person_ids: set[str] | None = None,
) -> set[str]:
    """
    Resolve an endpoint reference to the person ids it stands for.

    A person reference resolves to itself. A relationship reference resolves to the
    person endpoints of the referenced union (one id when it is self-referential).
    Anything that cannot be resolved yields an empty set.
    """
    if ref.is_person:
        if person_ids is not None and ref.id not in person_ids:
            return set()
        return {ref.id}

    union = lookup.get(ref.id)
    if union is None:
        return set()

    resolved: set[str] = set()
    for end in (union.source, union.target):
        if end.is_person and (person_ids is None or end.id in person_ids):
            resolved.add(end.id)
    return resolved


def get_relationship_participant_ids(
    relationship: Relationship, lookup: dict[str, Relationship]
) -> set[str]:
    """
    Collect every person id a relationship actually touches.

    For a union this is its one or two partners; for a child edge it is the union's
    partners plus the child.
    """
    return _resolve_ref(relationship.source, lookup) | _resolve_ref(relationship.target, lookup)


def build_focus_graph(
    relationships: Iterable[Relationship], person_ids: set[str] | None = None
) -> nx.Graph:
    """
    Build the undirected person-to-person adjacency used by focus mode.

    Union indirection is collapsed: a child hanging from a union is connected directly
    to each of the union's partners. Self-referential unions never produce a self-loop,
    and references that cannot be resolved are skipped.

    Args:
        relationships: All relationships in the diagram
        person_ids: Known person ids. When given, references to other person ids are
            treated as dangling.

    Returns:
        An undirected graph keyed by person id. Each edge carries the ids of the
        relationships that produced it under the `relationship_ids` attribute.
    """
    relationships = list(relationships)
    lookup = create_relationship_lookup(relationships)
    G = nx.Graph()

    for rel in relationships:
        sources = _resolve_ref(rel.source, lookup, person_ids)
        targets = _resolve_ref(rel.target, lookup, person_ids)
        if not sources or not targets:
            logger.debug("Skipping relationship %s with unresolvable endpoint", rel.id)
            continue

        G.add_nodes_from(sources | targets)
        for a in sources:
            for b in targets:
                if a == b:
                    continue
                if G.has_edge(a, b):
                    G.edges[a, b]["relationship_ids"].add(rel.id)
                else:
                    G.add_edge(a, b, relationship_ids={rel.id})

    return G


def get_connected_node_ids(node_id: str | None, graph: nx.Graph) -> set[str]:
    """Direct neighbours of `node_id`, or an empty set when it is not in the graph."""
    if node_id is None or node_id not in graph:
        return set()
    return set(graph.neighbors(node_id))


def get_highlighted_relationship_ids(
    relationships: Iterable[Relationship],
    visible_ids: set[str] | None,
    lookup: dict[str, Relationship],
    focused_id: str | None = None,
) -> set[str]:
    """
    Select the relationships to emphasise for a set of visible nodes.

    A relationship qualifies when any of its participants is visible. `visible_ids` of
    None means no filter is active, so every relationship qualifies. When `focused_id`
    is given, the relationship must also involve the focused node.
    """
    if visible_ids is None:
        return {rel.id for rel in relationships}
    if not visible_ids:
        return set()

    highlighted: set[str] = set()
    for rel in relationships:
        participants = get_relationship_participant_ids(rel, lookup)
        if focused_id is not None and focused_id not in participants:
            continue
        if participants & visible_ids:
            highlighted.add(rel.id)
    return highlighted


def find_all_connected_people(
    starting_ids: Iterable[str], relationships: Iterable[Relationship]
) -> set[str]:
    """Everyone reachable from any of `starting_ids`, following unions through to children."""
    G = build_focus_graph(relationships)
    connected: set[str] = set()
    for start in starting_ids:
        connected.add(start)
        if start in G:
            connected.update(nx.node_connected_component(G, start))
    return connected


@dataclass
class ImmediateFamily:
    parent_ids: list[str] = field(default_factory=list)
    child_ids: list[str] = field(default_factory=list)
    sibling_ids: list[str] = field(default_factory=list)


def _append_unique(items: list[str], value: str) -> None:
    if value not in items:
        items.append(value)


def find_immediate_family(person_id: str, relationships: Iterable[Relationship]) -> ImmediateFamily:
    """
    Find the parents, children and siblings of a person.

    Parents are the partners of every union the person is a child of; siblings are the
    other children of those unions; children hang from unions the person is a partner in.
    A child edge attached straight to a person counts that person as the parent.
    """
    relationships = list(relationships)
    lookup = create_relationship_lookup(relationships)
    child_edges = [rel for rel in relationships if rel.is_child]
    family = ImmediateFamily()
    me = NodeRef.person(person_id)

    # Where this person is the child
    for edge in child_edges:
        if edge.target != me:
            continue
        for parent in sorted(_resolve_ref(edge.source, lookup)):
            if parent != person_id:
                _append_unique(family.parent_ids, parent)
        for other in child_edges:
            if other.source == edge.source and other.target.is_person and other.target != me:
                _append_unique(family.sibling_ids, other.target.id)

    # Where this person is a parent
    parent_refs = {me}
    for rel in relationships:
        if rel.is_union_capable and me in (rel.source, rel.target):
            parent_refs.add(NodeRef.relationship(rel.id))

    for edge in child_edges:
        if edge.source in parent_refs and edge.target.is_person and edge.target != me:
            _append_unique(family.child_ids, edge.target.id)

    return family


def build_union_graph(state: DiagramState) -> nx.DiGraph:
    """
    Build a directed graph using the union-node model.

    Nodes are keyed by NodeRef so person and relationship ids can never collide:
    - person nodes carry the person's name and gender
    - each union-capable relationship becomes a "union" node
    - partners point at their union node (`partner_of`)
    - union nodes point at each child (`parent_of`); a child edge attached straight to
      a person points from that person instead

    Dangling references are left out.

    Args:
        state: Diagram state holding people and relationships

    Returns:
        A directed graph where every path follows the direction of descent
    """
    H = nx.DiGraph()
    person_ids = state.person_ids()

    for person in state.people:
        H.add_node(
            NodeRef.person(person.id), node_type="person", name=person.name, gender=person.gender
        )

    # Union nodes and the partners that form them
    for rel in state.relationships:
        if not rel.is_union_capable:
            continue
        partners = tuple(
            dict.fromkeys(
                end for end in (rel.source, rel.target) if end.is_person and end.id in person_ids
            )
        )
        if not partners:
            continue
        union_node = NodeRef.relationship(rel.id)
        H.add_node(union_node, node_type="union", rel_type=rel.type.value, partners=partners)
        for partner in partners:
            H.add_edge(partner, union_node, edge_type="partner_of", relationship_id=rel.id)

    # Children hang from union nodes
    for rel in state.relationships:
        if not rel.is_child:
            continue
        child = rel.target
        if not child.is_person or child.id not in person_ids:
            continue

        parent = rel.source
        if parent.is_relationship:
            if parent not in H:
                logger.debug("Child edge %s references missing union %s", rel.id, parent.id)
                continue
        elif parent.id not in person_ids:
            continue

        H.add_edge(parent, child, edge_type="parent_of", relationship_id=rel.id)

    return H
