"""Service Layer — read/write orchestration between routes, core and infrastructure."""
