"""lockshaker — reclassify dev-only packages in npm lockfiles."""

__version__ = "0.3.0"
