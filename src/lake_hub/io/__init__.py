"""I/O layer: storage collaborators for the domain layer."""
