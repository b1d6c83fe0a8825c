"""Matching services."""
