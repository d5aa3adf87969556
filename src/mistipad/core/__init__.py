"""
Core Package

Models, serialization and validation shared by storage and the manager.
"""
