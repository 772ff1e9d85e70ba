"""Infrastructure - database connections"""
