"""
Demo Data Module
"""
from .generators import DemoDataGenerator, seed_inventory

__all__ = ["DemoDataGenerator", "seed_inventory"]
