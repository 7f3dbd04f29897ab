"""School photo gallery - public albums with an admin panel."""

__version__ = "1.0.0"
