"""
Extension Transformation HTTP application.
"""
