"""Infrastructure layer - backend gateways, storage and media helpers."""
