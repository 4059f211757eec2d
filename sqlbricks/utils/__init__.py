"""Utility helpers for sqlbricks."""
