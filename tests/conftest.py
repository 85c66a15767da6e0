import os

from hypothesis import settings


# CI machines are slower but have time for more examples
settings.register_profile(
    "ci",
    deadline=None,
    max_examples=settings.default.max_examples * 5)

if "CI" in os.environ:
    settings.load_profile("ci")
