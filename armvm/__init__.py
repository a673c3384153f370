"""armvm — scaffold Ubuntu ARM64 Vagrant VMs for Parallels Desktop."""

__version__ = "0.1.0"
