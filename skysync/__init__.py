"""SkySync backend: live aircraft buffering and time-delayed playback."""

__version__ = "0.1.0"
