"""LifeTrack: goal tracking with points, streaks and levels"""

__version__ = "1.0.0"
