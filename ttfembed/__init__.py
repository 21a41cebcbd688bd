"""
Parse TrueType fonts and describe them for embedding in PDF documents.
"""

__version__ = '0.1.0'
