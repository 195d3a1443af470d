"""Pagination services."""
