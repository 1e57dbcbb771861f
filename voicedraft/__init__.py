"""VoiceDraft: voice memo to written draft via a generative-AI provider."""

__version__ = "0.1.0"
