"""Cockpit API - business dashboard backend."""
