"""Divina CLI command implementations."""
