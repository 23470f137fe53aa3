"""
Scale-to-zero controller service.
"""
