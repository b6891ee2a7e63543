"""Configuration package.

Holds the environment key names and the constants shared by the
credential resolver and the statement builder.
"""

from . import settings
