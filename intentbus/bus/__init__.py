"""Intent bus: envelopes, the priority queue and the ingress in front of it."""

from intentbus.bus.events import Envelope, HandlerResult
from intentbus.bus.ingress import Ingress
from intentbus.bus.queue import PriorityQueue

__all__ = ["Envelope", "HandlerResult", "Ingress", "PriorityQueue"]
