"""Health probe resources for service supervisors.

Usage
-----
Import the probe resource for route registration::

    from hookrelay.api.health.resources import ProbeResource
"""
