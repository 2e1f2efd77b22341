"""
Request/response schemas for the Social API.
"""
