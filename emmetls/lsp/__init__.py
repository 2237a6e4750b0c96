"""Language Server Protocol wiring for emmetls."""
