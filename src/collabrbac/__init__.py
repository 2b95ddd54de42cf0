"""collabrbac - role-based access control for shared goals and tasks."""

__version__ = "0.1.0"
