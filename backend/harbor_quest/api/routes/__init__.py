"""Route Modules — one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Routes never contain game logic (delegate to GameService)

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""
