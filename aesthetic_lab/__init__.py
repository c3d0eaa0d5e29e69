"""Pro Aesthetic Lab - three-view facial aesthetics report."""

__version__ = "0.1.0"
