"""
Core Layer - walking, classification, format detection, resolution and configuration.
"""
