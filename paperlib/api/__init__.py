"""HTTP API for Paper Library"""
