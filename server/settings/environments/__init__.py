"""Overriding settings for the selected environment."""
