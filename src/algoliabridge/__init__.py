"""algoliabridge — Algolia provider for a schema-agnostic indexing and search pipeline."""

__version__ = "0.1.0"
