"""Infrastructure services - image processing."""
