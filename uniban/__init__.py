"""
UniBan
Shares one ban database across many guilds, each filtering it with its own rules
"""

__version__ = '1.0.0'
