"""Graphical front end."""
