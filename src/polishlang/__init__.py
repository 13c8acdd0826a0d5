"""Polish Language settings sync."""

__app_name__ = "Polish Language"
__version__ = "0.2.0"
