"""
Static data — tool recipes and package lists.

Pure data. No logic beyond lookups.
"""
