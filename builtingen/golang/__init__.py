"""Go front end: parsing, constant folding, kind mapping and extraction."""
