"""Backtracking search for self-counting sentences."""
