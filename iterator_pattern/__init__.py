"""
Iterator Pattern

Core modules:
- cursors: sequence cursors (the iterator role) and the exhausted-access error
- containers: traversable containers (the aggregate role), array and linked backings
- events / event_sink: optional structured observability for adds and traversals
- spec_io: JSON container specs and event streams
- trace: helpers for producing step-by-step traversal logs (no behavior changes)
"""
