"""CUE front end for the generator."""
