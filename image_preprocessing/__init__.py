"""
Image Preprocessing Module

Rectification, enhancement and orientation of photographed document pages.
"""

from .preprocessor import PagePreprocessor, PageScan, ScanResult
from .scan_list import ScanList

__all__ = ['PagePreprocessor', 'PageScan', 'ScanResult', 'ScanList']
