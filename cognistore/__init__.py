"""Core of an RDF triple store: namespace-compressed triples, store limits and variable bindings."""

__version__ = "0.1.0"

__all__ = ["atom", "triples", "store", "storage", "namespaces", "variable", "engine"]