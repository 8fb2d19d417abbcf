"""
Services Package

This package contains the concept discovery services: registry storage and
search, relationship discovery, neighborhood exploration, pathfinding, and
relationship graph building. See the discovery subpackage.
"""
