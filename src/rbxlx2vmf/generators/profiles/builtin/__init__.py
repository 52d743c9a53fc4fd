"""
Built-in game profiles for Source engine games.
"""

from .source_games import SOURCE_GAME_PROFILES

__all__ = ['SOURCE_GAME_PROFILES']
