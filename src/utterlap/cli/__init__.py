"""utterlap command line interface."""
