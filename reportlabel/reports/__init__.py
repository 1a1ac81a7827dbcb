"""Report generation from filtered label lookups."""
