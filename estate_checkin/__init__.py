"""Real-estate event backend with geolocated QR check-in."""

__version__ = "1.0.0"
