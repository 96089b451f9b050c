"""hostprep: prepare a fresh VM's data disks and filesystem layout for a Kubernetes install."""

__version__ = "0.1.0"
