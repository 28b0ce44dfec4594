"""Shared constants, record types and logging configuration."""
