"""
Raid Combat Log Parser

Turns raw raid-client combat logs into boss pulls with classified actor
rosters, damage events and per-actor DPS.
"""

__version__ = "0.1.0"
__author__ = "Raidlog Parser Team"
