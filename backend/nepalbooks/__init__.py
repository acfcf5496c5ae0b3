"""NepalBooks - small business accounting & inventory backend"""

__version__ = "1.1.0"
