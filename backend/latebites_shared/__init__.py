"""Shared infrastructure for the Latebites backend: config, logging, db, security."""
