"""
Latebites REST API.
"""
