"""
Shared Kernel

Base classes and utilities shared by the catalog, availability and
booking contexts: domain events, value objects, domain errors, the unit
of work and the message bus.
"""
