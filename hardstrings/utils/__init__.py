"""
Utils module for HardStrings
============================
"""
