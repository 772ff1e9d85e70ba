"""Catalog - the analysed-apps library"""
