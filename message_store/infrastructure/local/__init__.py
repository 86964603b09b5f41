"""Local (SQLite) infrastructure implementations."""
