"""
API routers grouped by audience: public, customer and auth.
"""
