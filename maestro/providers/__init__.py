"""External model providers."""
