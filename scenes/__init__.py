"""scenes — pygame scenes and their draw helpers."""
