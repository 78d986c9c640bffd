"""Geometry, text measurement and render trees."""
