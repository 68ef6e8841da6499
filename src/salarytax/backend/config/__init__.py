"""Tax year bracket configuration."""
