"""
Vocalis: voice assistant backend that turns spoken commands into structured intents
"""
__version__ = "0.1.0"
