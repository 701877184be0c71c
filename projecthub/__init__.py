"""ProjectHub: projects, tasks, time tracking and email-thread timelines."""

__version__ = "0.1.0"
