"""Members Portal web application."""
