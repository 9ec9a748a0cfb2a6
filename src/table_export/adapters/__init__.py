"""Adapters – transport integrations for the export pipeline."""
