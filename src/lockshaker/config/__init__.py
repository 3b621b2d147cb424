"""Configuration — TOML discovery, settings, presets, and logging."""
