"""
Utility modules: HTTP exceptions, API schemas, geo helpers.
"""
