"""Small helpers used across blueprints and services."""
