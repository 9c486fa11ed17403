"""Service layer: business logic kept independent of the HTTP routes."""
