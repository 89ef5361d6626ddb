"""Operational scripts for Slapboard."""
