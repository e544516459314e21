"""Models, storage helpers, schemas and the content codec."""
