"""
Tools Package

All tools in this directory are auto-discovered by registry.py
Each tool inherits from Tool and implements name, description,
parameters and execute().
"""

# Tools are auto-discovered, no explicit imports needed
