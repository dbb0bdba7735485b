"""Routing — exact and subtree path matching over registered resources.

Routes are bound to literal path strings. A pattern ending in ``/``
also matches every path below it; the longest matching pattern wins.
"""
