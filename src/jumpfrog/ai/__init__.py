"""Bot opponents."""
