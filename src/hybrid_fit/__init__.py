"""
hybrid-fit: workout tracker for calisthenics and weight training.

Plans are run as live sessions with per-set tracking and a rest timer;
finished sessions go into a history log that progress charts are built from.
"""

__version__ = "0.1.0"
