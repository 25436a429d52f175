"""monopub: bump, propagate and publish the packages of a monorepo."""

__version__ = "0.1.0"
