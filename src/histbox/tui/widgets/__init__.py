"""Textual widgets for the histbox UI."""
