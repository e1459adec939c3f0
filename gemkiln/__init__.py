"""gemkiln -- generate Ruby gem projects from composable template sets."""

__version__ = "0.1.0"
