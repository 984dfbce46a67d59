"""Console presentation and application bootstrap."""
