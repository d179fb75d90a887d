"""
Sublinex - Linear subtitle retiming utility.

Shifts and rescales every caption of a subtitle track so the first and
last captions start at chosen times, keeping relative spacing intact.
"""

__version__ = "0.1.0";
__author__ = "Sublinex Project";
__license__ = "MIT";
