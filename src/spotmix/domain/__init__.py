"""Domain layer: DTOs, ports and exceptions."""
