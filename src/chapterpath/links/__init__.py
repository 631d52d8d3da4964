"""Chapter name index and placeholder resolution."""
