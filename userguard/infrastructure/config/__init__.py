"""Infrastructure wiring: database and service container."""
