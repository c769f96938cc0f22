"""Dispatching: turn middleware references into a continuation chain.

``Dispatcher`` normalizes any supported middleware reference into a call.
``DispatchStack`` runs an ordered sequence of middleware, each one given a
``next`` that continues with the rest of the sequence.
"""

from waypoint.dispatching.dispatcher import Dispatcher
from waypoint.dispatching.stack import DispatchStack

__all__ = ["DispatchStack", "Dispatcher"]
