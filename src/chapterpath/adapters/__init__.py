"""Adapters between mdBook and the preprocessor."""
