"""Game domain services: phase timers, scoring and recovery.

This package contains pure(ish) domain logic that should be imported by
HTTP routes and CLI commands, keeping transport concerns separated
from core game mechanics.
"""
