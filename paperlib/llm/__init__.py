"""LLM gateway, prompts and response recovery"""
