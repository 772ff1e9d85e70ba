"""Content parsing - source files to ParsedFile records"""
