"""Infrastructure layer: persistence, HTTP, queue and encoder adapters."""
