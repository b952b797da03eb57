"""Utility modules for building, generating and persisting problems."""
