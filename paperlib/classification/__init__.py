"""Classification - heuristic glyph rules and the AI enrichment pipeline"""
