"""zg - parallel text search over recently modified files"""

from zg.__version__ import __version__

__all__ = ['__version__']
