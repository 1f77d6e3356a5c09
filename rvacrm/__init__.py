"""Customer relationship management models, services, SQL repositories and WSGI handlers."""

__version__ = "0.1.0"
__all__ = [
    "activity",
    "billing",
    "contacts",
    "core",
    "customers",
    "handlers",
    "projects",
    "repository",
    "service",
]