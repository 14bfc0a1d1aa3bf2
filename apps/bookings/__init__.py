"""Bookings app package.

Availability resolution, write-time conflict checking, reservation codes,
date modification and the cancellation policy for rooms and halls.
"""
