"""Validation, file and environment helpers."""
