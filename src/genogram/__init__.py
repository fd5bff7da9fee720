"""Relationship graph model and derived-view engines for genogram diagrams."""
