"""
Normalisation of raw broadcast records.
"""
