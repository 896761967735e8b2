"""Build unikernel images and manage them across hypervisors and clouds."""

__version__ = "0.1.0"
