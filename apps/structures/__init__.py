"""Structures app package.

The catalog of bookable shared resources (spa, grill, tasting room) and
the daily grid of time slots each of them offers. Structures managed
``by_unit`` expose one independent slot pool per named unit.
"""
