"""View decorators."""
