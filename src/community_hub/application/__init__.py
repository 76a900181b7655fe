"""Application layer - hub services orchestrating domain logic."""
