"""Provision a single GCP VM and bootstrap a docker compose stack onto it."""

__version__ = "0.1.0"
