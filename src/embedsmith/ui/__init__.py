"""User interfaces built on top of the embedding engine."""
