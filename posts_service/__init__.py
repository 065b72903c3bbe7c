"""
Posts Service - posts, likes and popularity ranking
"""
