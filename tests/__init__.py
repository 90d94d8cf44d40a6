"""
CueTimer Test Suite
"""
