"""End-to-end scenario tests against FastAPI applications."""
