"""Session engine, rest timer, progress series and shared models."""
