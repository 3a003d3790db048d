"""
softserve scaffolds WordPress themes backed by the softserve-scripts
webpack build.
"""

__version__ = "0.1.0"
