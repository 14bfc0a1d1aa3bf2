"""Packages app package.

Corporate packages: one event hall, a mix of rooms and optional catering
validated together and confirmed as a main reservation plus one room
reservation per unit.
"""
