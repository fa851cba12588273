"""Dispatch loop and runtime wiring."""

from intentbus.runtime.dispatcher import DispatchState, Dispatcher

__all__ = ["DispatchState", "Dispatcher"]
