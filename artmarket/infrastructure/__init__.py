"""Infrastructure layer: persistence, outbound adapters, event bus and logging."""
