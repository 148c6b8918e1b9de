"""Adapters layer - Implementations of the ports.

Adapters connect the application core to files and libraries:
- graph: record readers and the route solver
- rendering: Graphviz and Folium renderers
"""
