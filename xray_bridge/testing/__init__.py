"""Test helpers: factories and payload builders."""
