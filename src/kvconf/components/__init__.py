"""Adjust, load and dump components."""
