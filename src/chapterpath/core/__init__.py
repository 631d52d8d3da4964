"""Core domain types, ports and errors."""
