"""
Welcome server package.

Provides:
- GreetingRouter with the root and named greeting handlers
- FastAPI application factory that mounts the router under a prefix
- uvicorn entry point configured from YAML and environment variables
"""
