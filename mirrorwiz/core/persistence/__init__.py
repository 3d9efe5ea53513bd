"""
Persistence — flat-file output for the generated site.
"""
