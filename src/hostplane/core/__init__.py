"""Core domain types, configuration and errors."""
