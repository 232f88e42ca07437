"""Request models and handlers behind the service routes."""
