"""Adapters for storage, the Cloud API and web frameworks."""
