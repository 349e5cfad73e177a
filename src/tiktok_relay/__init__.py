"""Ponte webhook → vídeo TikTok → WhatsApp."""

__version__ = "0.1.0"
