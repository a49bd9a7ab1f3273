"""Data models for reports, mappings and Xray payloads."""
