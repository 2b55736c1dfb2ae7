"""
botflow - Dependency graphs for conversations and their mini-app runs.

Turns four loosely-coupled JSON logs (conversation turns, step logs,
mini-app runs, run logs) into a render-ready GraphModel with a step
timeline and a per-step mini-app dependency tree.
"""

__version__ = "0.1.0"
