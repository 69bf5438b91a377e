"""Utility helpers for the Scouty wallet scanner."""
