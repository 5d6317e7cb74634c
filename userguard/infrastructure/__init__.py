"""Infrastructure adapters: persistence, security, events and wiring."""
