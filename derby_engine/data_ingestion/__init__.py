"""Observed timing ingestion for the derby simulation engine."""
