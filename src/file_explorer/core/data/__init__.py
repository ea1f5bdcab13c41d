"""Data layer: filesystem policies used by the traversal engine."""
