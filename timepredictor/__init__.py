"""
Processing Time Predictor.

Predicts how long transcription and summarization of YouTube videos,
audio/video files and PDF documents will take, based on the measured
timings of previous jobs.
"""

from timepredictor.config import config

__version__ = config.APP_VERSION
