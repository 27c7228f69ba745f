"""Infrastructure layer: HTTP integrations, plugins and observability."""
