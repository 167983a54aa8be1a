"""Application services (use cases) of the blog API."""
