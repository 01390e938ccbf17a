"""Overlay presentation and terminal rendering."""
