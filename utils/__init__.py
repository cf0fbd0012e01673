"""Shared utilities for netnet."""
