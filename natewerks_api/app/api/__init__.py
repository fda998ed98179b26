"""
HTTP layer: routers and FastAPI dependencies.
"""
