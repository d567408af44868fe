"""
Utilities: exceptions, schemas, decimal helpers.
"""
