"""Shared utilities: telemetry and small helpers used across layers."""
