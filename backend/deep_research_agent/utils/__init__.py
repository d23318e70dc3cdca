"""Utility helpers module."""
