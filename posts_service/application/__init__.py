"""Application layer - use cases"""
