"""Infrastructure layer: DB pool, repositories and rendering adapters."""
