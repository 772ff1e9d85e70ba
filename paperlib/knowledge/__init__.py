"""Knowledge - book parsing, insight extraction and the knowledge library"""
