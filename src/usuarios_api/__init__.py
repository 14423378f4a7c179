"""Usuarios API: CRUD over user records with optional photo upload."""
