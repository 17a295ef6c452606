import os

# The API is mounted by config.urls and by every test client.
os.environ.setdefault("NINJA_SKIP_REGISTRY", "yes")
