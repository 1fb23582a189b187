"""Presentation-side state for the sleep tracker.

These modules avoid hard dependencies on a display server (e.g., Tkinter) so
they can be imported in headless test runs. A front-end observes the
LiveValues on SleepTrackerState and calls its action methods.
"""
