"""edgeinclude command line interface."""
