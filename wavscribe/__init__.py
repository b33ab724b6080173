"""wavscribe - streaming WAV transcription with energy-based segmentation."""

__version__ = "0.1.0"
