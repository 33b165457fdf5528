"""Pure domain rules (no I/O) used by the services."""
