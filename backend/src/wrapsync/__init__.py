"""Multiplayer relay and session-state server for the car wrap visualizer."""

__version__ = "0.1.0"
