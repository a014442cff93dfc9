"""
Paper Detection Module

Isolated module for paper detection in images.
Finds the quadrilateral boundary of a page in a photo.
"""

from .detector import PaperDetector, DetectionResult

__all__ = ['PaperDetector', 'DetectionResult']
