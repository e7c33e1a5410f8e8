"""
HTTP API for post analysis, duplicate removal and post-group refresh.
"""
