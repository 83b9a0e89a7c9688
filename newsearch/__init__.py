"""
newsearch - synonym mining, query correction and query expansion for news search.
"""

__version__ = "0.1.0"
