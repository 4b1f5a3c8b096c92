"""Core domain: models, ports, normalization and dispatch."""
