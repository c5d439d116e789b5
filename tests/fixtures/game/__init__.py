"""A tiny game namespace used as a discovery root."""
