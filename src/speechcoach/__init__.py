"""speechcoach: AI coaching feedback for recorded speech-practice videos."""

__version__ = "0.1.0"
