"""Documents that can be paginated."""
