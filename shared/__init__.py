"""
Shared Kernel

Value objects, domain events and application plumbing (unit of work,
message bus, HTTP error mapping) used by every HotelesCO app.
"""
