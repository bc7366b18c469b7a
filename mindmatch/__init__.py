"""
MindMatch - Card-Matching Memory Game Engine

A deterministic, single-threaded engine for the classic pairs game.
The engine provides:
- Seeded deck generation from a symbol pool
- An explicit selection state machine (reducer)
- Cancellable, generation-guarded mismatch resets
- Session hosting behind a REST API and a terminal CLI
"""

__version__ = "0.1.0"
