"""HTTP surface for Slapboard."""
