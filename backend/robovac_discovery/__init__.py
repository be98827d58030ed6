"""Local network discovery of Eufy RoboVac devices."""

__version__ = "1.0.0"
