"""Seed-based AI recommendation backend (songs, movies, TV shows)."""
