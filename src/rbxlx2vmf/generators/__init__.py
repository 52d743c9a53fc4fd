"""
Generators package: target game profiles.
"""
