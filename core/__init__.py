"""core package initialization.

Making `core` an explicit package so imports like `import core.collision`
work reliably when running `main.py` from the project root.

Everything in here except `app`, `scene` and `audio` is pygame-free.
"""

__all__ = ["app", "audio", "collision", "constants", "data", "events", "scene", "tuning"]
