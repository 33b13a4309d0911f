"""
Core scoring → classification → coding pipeline.
"""
