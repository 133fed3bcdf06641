"""Service layer: data access and integrations."""
