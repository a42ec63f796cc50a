"""
joyo-drill: Joyo Kanji flashcard drill with hands-free pose control.
"""

__version__ = "1.0.0"
