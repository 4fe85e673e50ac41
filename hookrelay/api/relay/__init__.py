"""Webhook relay sink.

Usage
-----
Import the sink for registration::

    from hookrelay.api.relay.resources import RelayResource
"""
