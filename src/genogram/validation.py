"""Diagram validation for genogram data."""

from collections import Counter

import networkx as nx

from genogram.graph import build_union_graph
from genogram.households import recompute_membership
from genogram.models import DiagramState


def validate_state(state: DiagramState) -> list[str]:
    """
    Validate the diagram for:
    - Ids shared between people and relationships, or repeated within a collection
    - Relationship endpoints that do not resolve
    - Child edges whose union was deleted, or that attach straight to a person
    - Self-referential relationships of a type that cannot stand alone
    - Degenerate household boundaries and stale member caches
    - Cycles in ancestry (someone who is their own ancestor)

    Returns a list of warning messages.
    """
    warnings: list[str] = []

    person_ids = state.person_ids()
    relationship_ids = state.relationship_ids()

    # Duplicate ids
    for label, ids in (
        ("person", [p.id for p in state.people]),
        ("relationship", [r.id for r in state.relationships]),
        ("household", [h.id for h in state.households]),
        ("text box", [t.id for t in state.text_boxes]),
    ):
        for dup, count in Counter(ids).items():
            if count > 1:
                warnings.append(f"Duplicate {label} id {dup!r} used {count} times")

    for shared in sorted(person_ids & relationship_ids):
        warnings.append(f"Id {shared!r} is used by both a person and a relationship")

    # Endpoint resolution
    for rel in state.relationships:
        for side, ref in (("from", rel.source), ("to", rel.target)):
            known = person_ids if ref.is_person else relationship_ids
            if ref.id in known:
                continue
            if rel.is_child and side == "from" and ref.is_relationship:
                warnings.append(
                    f"Orphaned child relationship {rel.id!r}: union {ref.id!r} no longer exists"
                )
            else:
                warnings.append(
                    f"Relationship {rel.id!r} has dangling '{side}' reference "
                    f"to {ref.kind.value} {ref.id!r}"
                )

        if rel.is_child and rel.source.is_person and rel.source.id in person_ids:
            warnings.append(
                f"Child relationship {rel.id!r} attaches to person {rel.source.id!r} "
                f"instead of a union"
            )
        elif rel.is_self_referential and not rel.is_union_capable:
            warnings.append(
                f"Relationship {rel.id!r} of type {rel.type.value!r} connects "
                f"{rel.source.id!r} to itself"
            )

    # Households
    for household in state.households:
        if household.is_degenerate:
            warnings.append(
                f"Household {household.id!r} has {len(household.points)} boundary point(s); "
                f"at least 3 are needed"
            )
        expected = set(recompute_membership(household, state.people))
        if set(household.members) != expected:
            warnings.append(f"Household {household.id!r} member list is out of date")

    # Check for ancestry cycles
    union_graph = build_union_graph(state)
    try:
        cycle = nx.find_cycle(union_graph, orientation="original")
        cycle_nodes = [edge[0].id for edge in cycle if edge[0].is_person]
        warnings.append(f"Cycle detected in parent-child relationships: {cycle_nodes}")
    except nx.NetworkXNoCycle:
        pass  # No cycle found, which is good

    return warnings
