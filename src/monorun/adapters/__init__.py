"""Adapters over the filesystem, child processes and PATH lookups."""
