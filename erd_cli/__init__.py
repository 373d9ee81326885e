"""ERD CLI - Mermaid entity-relationship diagrams from database metadata."""

__version__ = "0.1.0"
