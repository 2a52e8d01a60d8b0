"""HTTP-facing value types: query parameters and responses."""
