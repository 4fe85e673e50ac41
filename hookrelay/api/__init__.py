"""Relay HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application that receives CMS webhooks.

Usage
-----
Create the application::

    from hookrelay.api import build_dependencies, create_app

    app = create_app(build_dependencies(config))

Public API
----------
create_app
    Application factory registering the relay sink, probe routes,
    request logging, and error handlers.
build_dependencies
    Builds the relay collaborators from a ``RelayConfig``.
"""

from hookrelay.api.app import AppDependencies, create_app
from hookrelay.api.factory import build_dependencies

__all__ = ["AppDependencies", "build_dependencies", "create_app"]
