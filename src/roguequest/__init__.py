"""Rogue Quest: auto-battling roguelite RPG core."""

__version__ = "0.1.0"
