"""Compile graph relationships into parameterized Cypher statements."""

__version__ = "0.1.0"
