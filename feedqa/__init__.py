"""
feedqa - Feed Reader with Article Question Answering

Fetches RSS 2.0 and Atom feeds, normalizes their entries into a single
article model, and answers natural-language questions about a selected
article with an extractive question-answering model.
"""

__version__ = "0.1.0"
