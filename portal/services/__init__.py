"""Gateway and services built on the Directory Service client."""
