import os

os.environ.setdefault("NINJA_SKIP_REGISTRY", "yes")
