"""API Layer — the HTTP shell around the dispatcher.

Invariants:
    - One catch-all route; all method/path decisions belong to the Dispatcher
"""
